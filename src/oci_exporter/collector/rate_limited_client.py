from __future__ import annotations

from loguru import logger

from oci_exporter.collector.monitoring_client import MonitoringClient
from oci_exporter.collector.pacer import CallPacer
from oci_exporter.collector.retry import RetryPolicy, is_rate_limit_error
from oci_exporter.models.config_models import Tenant
from oci_exporter.models.monitoring_models import Query, QueryResponse
from oci_exporter.telemetry.exporter_metrics import ExporterTelemetry
from oci_exporter.utils.exceptions import TransientQueryError


class RateLimitedClient:
    """Paces every outbound call through a shared CallPacer and retries throttled calls.

    Failures of any kind leave as TransientQueryError, chained to the last
    provider error.
    """

    def __init__(
        self,
        client: MonitoringClient,
        *,
        pacer: CallPacer,
        retry_policy: RetryPolicy | None = None,
        telemetry: ExporterTelemetry | None = None,
    ):
        self._client = client
        self._pacer = pacer
        self._retry_policy = retry_policy or RetryPolicy()
        self._telemetry = telemetry

    async def invoke(self, tenant: Tenant, query: Query) -> QueryResponse:
        attempts = 0

        async def attempt() -> QueryResponse:
            nonlocal attempts
            if attempts > 0 and self._telemetry:
                self._telemetry.query_retries_total.labels(tenancy=tenant.name, namespace=query.namespace).inc()
            attempts += 1
            await self._pacer.wait()
            return await self._client.summarize_metrics_data(tenant.region, query)

        try:
            response = await self._retry_policy.call(attempt)
        except Exception as e:
            status = "rate_limited" if is_rate_limit_error(e) else "error"
            self._record(tenant, query, status)
            raise TransientQueryError(
                f"Failed to query metrics for namespace {query.namespace} in {tenant.name} "
                f"after {attempts} attempt(s): {e}",
                tenancy=tenant.name,
                namespace=query.namespace,
            ) from e

        self._record(tenant, query, "success")
        logger.debug(f"Queried {query.namespace} in {tenant.name}: {len(response.series)} series")
        return response

    def _record(self, tenant: Tenant, query: Query, status: str) -> None:
        if self._telemetry:
            self._telemetry.queries_total.labels(tenancy=tenant.name, namespace=query.namespace, status=status).inc()
