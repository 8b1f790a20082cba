"""Build MQL queries for a namespace.

Two strategies are supported:

- ``grouped``: every metric of a namespace goes into one comma-joined
  expression, one API call per (tenancy, namespace).
- ``per_metric``: one API call per (tenancy, namespace, metric).

Grouped mode is the default since it keeps request volume at
O(namespaces) instead of O(metrics).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Sequence

from oci_exporter.models.config_models import MetricNamespace, Tenant
from oci_exporter.models.monitoring_models import Query

AGGREGATION_INTERVAL = "1m"


class QueryMode(str, Enum):
    GROUPED = "grouped"
    PER_METRIC = "per_metric"


def metric_term(metric_name: str) -> str:
    return f"{metric_name}[{AGGREGATION_INTERVAL}].mean()"


def build_query_text(metric_names: Sequence[str]) -> str | None:
    """One mean-aggregation term per entry (duplicates included), comma-joined. None when empty."""
    if not metric_names:
        return None
    return ",".join(metric_term(name) for name in metric_names)


def query_window(now: datetime | None = None, lookback: timedelta = timedelta(minutes=5)) -> tuple[datetime, datetime]:
    end = now or datetime.now(timezone.utc)
    return end - lookback, end


def build_queries(
    tenant: Tenant,
    namespace: MetricNamespace,
    window: tuple[datetime, datetime],
    mode: QueryMode = QueryMode.GROUPED,
) -> list[Query]:
    if not namespace.names:
        return []

    if mode == QueryMode.PER_METRIC:
        batches = [(name,) for name in namespace.names]
    else:
        batches = [tuple(namespace.names)]

    start, end = window
    return [
        Query(
            namespace=namespace.namespace,
            query_text=build_query_text(batch),
            metric_names=batch,
            compartment_id=tenant.compartment_id,
            compartment_id_in_subtree=True,
            start_time=start,
            end_time=end,
            resource_group=namespace.resource_group or None,
            resolution=namespace.resolution or None,
        )
        for batch in batches
    ]
