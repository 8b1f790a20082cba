"""Provider-facing side of the collector.

`MonitoringClient` is the narrow protocol the rest of the collector depends
on; `OCIMonitoringClient` implements it with the OCI Python SDK.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Protocol

import oci
from loguru import logger

from oci_exporter.models.monitoring_models import Datapoint, MetricSeries, Query, QueryResponse
from oci_exporter.utils.exceptions import AuthError, RateLimitError


class MonitoringClient(Protocol):
    async def summarize_metrics_data(self, region: str, query: Query) -> QueryResponse: ...


def _to_series(item: Any) -> MetricSeries:
    return MetricSeries(
        name=item.name or None,
        dimensions={k: v for k, v in (item.dimensions or {}).items() if v is not None},
        datapoints=[
            Datapoint(timestamp=dp.timestamp, value=dp.value)
            for dp in (item.aggregated_datapoints or [])
            if dp.value is not None
        ],
    )


class OCIMonitoringClient:
    """SummarizeMetricsData over the OCI SDK, with one SDK client per region."""

    def __init__(self, config: dict[str, Any], signer: Any | None = None):
        self._config = config
        self._signer = signer
        self._clients: dict[str, oci.monitoring.MonitoringClient] = {}
        self._clients_lock = threading.Lock()

    @classmethod
    def from_config_file(cls, path: str, profile: str = "DEFAULT") -> OCIMonitoringClient:
        try:
            config = oci.config.from_file(file_location=path, profile_name=profile)
            oci.config.validate_config(config)
        except (oci.exceptions.ClientError, OSError, ValueError) as e:
            raise AuthError(f"Failed to load OCI config from {path} (profile {profile}): {e}") from e
        logger.info(f"Loaded OCI config from {path} (profile {profile})")
        return cls(config)

    @classmethod
    def from_instance_principal(cls) -> OCIMonitoringClient:
        try:
            signer = oci.auth.signers.InstancePrincipalsSecurityTokenSigner()
        except Exception as e:
            raise AuthError(f"Failed to obtain instance principal credentials: {e}") from e
        logger.info("Using instance principal credentials")
        return cls({"region": signer.region}, signer=signer)

    def _client_for(self, region: str) -> oci.monitoring.MonitoringClient:
        with self._clients_lock:
            client = self._clients.get(region)
            if client is None:
                kwargs: dict[str, Any] = {"retry_strategy": oci.retry.NoneRetryStrategy()}
                if self._signer is not None:
                    kwargs["signer"] = self._signer
                try:
                    client = oci.monitoring.MonitoringClient(dict(self._config, region=region), **kwargs)
                except Exception as e:
                    raise AuthError(f"Failed to create monitoring client for region {region}: {e}") from e
                self._clients[region] = client
            return client

    def _summarize(self, region: str, query: Query) -> QueryResponse:
        details = oci.monitoring.models.SummarizeMetricsDataDetails(
            namespace=query.namespace,
            query=query.query_text,
            start_time=query.start_time,
            end_time=query.end_time,
            resource_group=query.resource_group,
            resolution=query.resolution,
        )
        try:
            response = self._client_for(region).summarize_metrics_data(
                compartment_id=query.compartment_id,
                summarize_metrics_data_details=details,
                compartment_id_in_subtree=query.compartment_id_in_subtree,
            )
        except oci.exceptions.ServiceError as e:
            if e.status == 429:
                raise RateLimitError(f"{e.code}: {e.message}") from e
            raise
        return QueryResponse(series=[_to_series(item) for item in response.data or []])

    async def summarize_metrics_data(self, region: str, query: Query) -> QueryResponse:
        return await asyncio.to_thread(self._summarize, region, query)
