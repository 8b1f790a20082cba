"""Latest-value store behind the exporter's /metrics endpoint.

Values live on a dedicated CollectorRegistry owned by the MetricRegistry
instance, so scrapes only contain exporter metrics (not python_gc_*,
process_*, etc.) and tests can build a fresh registry each time.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Iterable, Iterator

from prometheus_client import CollectorRegistry
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from oci_exporter.models.monitoring_models import LABEL_NAMES, LabelSet

METRIC_NAME = "oci_metric_value"
METRIC_HELP = "OCI Monitoring metric value"


class _LatestValueCollector(Collector):
    def __init__(self, store: MetricRegistry):
        self._store = store

    def collect(self) -> Iterator[GaugeMetricFamily]:
        family = GaugeMetricFamily(METRIC_NAME, METRIC_HELP, labels=list(LABEL_NAMES))
        for label_set, value in self._store.snapshot():
            family.add_metric(label_set.label_values(), value)
        yield family


class MetricRegistry:
    """LabelSet -> last observed value. Writes are last-writer-wins per label set."""

    def __init__(self, registry: CollectorRegistry | None = None, *, clock: Callable[[], float] = time.monotonic):
        self.collector_registry = registry if registry is not None else CollectorRegistry()
        self._clock = clock
        self._lock = threading.Lock()
        self._values: dict[LabelSet, tuple[float, float]] = {}  # label set -> (value, updated_at)
        self.collector_registry.register(_LatestValueCollector(self))

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)

    def set(self, label_set: LabelSet, value: float) -> None:
        with self._lock:
            self._values[label_set] = (float(value), self._clock())

    def set_many(self, items: Iterable[tuple[LabelSet, float]]) -> int:
        """Write a batch under one lock acquisition so readers see all of it or none of it."""
        now = self._clock()
        batch = [(label_set, float(value)) for label_set, value in items]
        with self._lock:
            for label_set, value in batch:
                self._values[label_set] = (value, now)
        return len(batch)

    def get(self, label_set: LabelSet) -> float | None:
        with self._lock:
            entry = self._values.get(label_set)
        return entry[0] if entry is not None else None

    def snapshot(self) -> list[tuple[LabelSet, float]]:
        """Consistent copy of every published value."""
        with self._lock:
            return [(label_set, value) for label_set, (value, _) in self._values.items()]

    def evict_stale(self, max_age_sec: float) -> int:
        """Drop entries not refreshed within `max_age_sec`. Returns how many were removed."""
        cutoff = self._clock() - max_age_sec
        with self._lock:
            stale = [label_set for label_set, (_, updated_at) in self._values.items() if updated_at < cutoff]
            for label_set in stale:
                del self._values[label_set]
        return len(stale)
