"""Periodic collection loop feeding the MetricRegistry."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import partial
from typing import Callable

from loguru import logger

from oci_exporter.collector.query_builder import QueryMode, build_queries, query_window
from oci_exporter.collector.rate_limited_client import RateLimitedClient
from oci_exporter.collector.sample_mapper import map_response
from oci_exporter.models.config_models import MetricConfig, MetricNamespace, TenancyConfig, Tenant
from oci_exporter.models.monitoring_models import LabelSet, Query
from oci_exporter.telemetry.exporter_metrics import ExporterTelemetry
from oci_exporter.telemetry.metric_registry import MetricRegistry
from oci_exporter.utils.asyncio_utils import gather_parallel
from oci_exporter.utils.exceptions import TransientQueryError


@dataclass
class SweepResult:
    jobs: int = 0
    failures: int = 0
    samples: int = 0
    evicted: int = 0
    duration_sec: float = 0.0
    finished_at: datetime | None = None


class CollectionScheduler:
    """Sweeps every (tenancy, namespace) pair on a fixed period.

    One sweep:
        - builds fresh queries over [now - lookback, now)
        - invokes them through the shared RateLimitedClient
        - maps each response and writes the samples into the registry

    A failing pair is logged and counted; it never stops the rest of the sweep,
    and its previously published values stay visible.
    """

    def __init__(
        self,
        client: RateLimitedClient,
        registry: MetricRegistry,
        tenancies: TenancyConfig,
        metrics: MetricConfig,
        *,
        interval_sec: float = 60.0,
        lookback: timedelta = timedelta(minutes=5),
        mode: QueryMode = QueryMode.GROUPED,
        max_concurrency: int = 1,
        stale_ttl_sec: float = 0.0,
        telemetry: ExporterTelemetry | None = None,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self._client = client
        self._registry = registry
        self._tenancies = tenancies
        self._metrics = metrics
        self._interval_sec = interval_sec
        self._lookback = lookback
        self._mode = mode
        self._max_concurrency = max_concurrency
        self._stale_ttl_sec = stale_ttl_sec
        self._telemetry = telemetry
        self._now = now

        self._sweep_task: asyncio.Task | None = None
        self._running = False
        self.last_result: SweepResult | None = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the background sweep task."""
        if self._running:
            return
        self._running = True
        self._sweep_task = asyncio.create_task(self._sweep_loop(), name="oci-collection-sweep")
        logger.info(
            f"CollectionScheduler started (interval={self._interval_sec}s, mode={self._mode.value}, "
            f"tenancies={len(self._tenancies.tenancies)}, namespaces={len(self._metrics.metrics)})"
        )

    async def stop(self) -> None:
        """Cancel the background task. An in-flight sweep is abandoned."""
        self._running = False
        if self._sweep_task and not self._sweep_task.done():
            self._sweep_task.cancel()
            try:
                await self._sweep_task
            except asyncio.CancelledError:
                pass
        self._sweep_task = None
        logger.info("CollectionScheduler stopped")

    # --- Background loop ---

    async def _sweep_loop(self) -> None:
        while self._running:
            try:
                await self.sweep()
                await asyncio.sleep(self._interval_sec)
            except asyncio.CancelledError:
                break
            except Exception:
                logger.exception("Error in collection sweep loop")
                await asyncio.sleep(self._interval_sec)

    # --- One sweep ---

    def _plan(self) -> list[tuple[Tenant, MetricNamespace, Query]]:
        window = query_window(self._now(), self._lookback)
        return [
            (tenant, namespace, query)
            for tenant in self._tenancies.tenancies
            for namespace in self._metrics.metrics
            for query in build_queries(tenant, namespace, window, self._mode)
        ]

    async def sweep(self) -> SweepResult:
        started = time.monotonic()
        plan = self._plan()
        results = await gather_parallel(
            [partial(self._collect, tenant, query) for tenant, _, query in plan],
            max_concurrency=self._max_concurrency,
        )

        result = SweepResult(jobs=len(plan))
        for (tenant, _, query), outcome in zip(plan, results):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                result.failures += 1
                if not isinstance(outcome, TransientQueryError):
                    logger.opt(exception=outcome).error(
                        f"Unexpected error collecting {query.namespace} in {tenant.name}"
                    )
            else:
                result.samples += outcome

        if self._stale_ttl_sec > 0:
            result.evicted = self._registry.evict_stale(self._stale_ttl_sec)
            if result.evicted:
                logger.info(f"Evicted {result.evicted} stale series")

        result.duration_sec = time.monotonic() - started
        result.finished_at = datetime.now(timezone.utc)
        self.last_result = result
        self._record(result)

        logger.info(
            f"Sweep finished: {result.jobs} queries, {result.failures} failed, "
            f"{result.samples} samples in {result.duration_sec:.1f}s"
        )
        return result

    async def _collect(self, tenant: Tenant, query: Query) -> int:
        with logger.contextualize(tenancy=tenant.name, namespace=query.namespace):
            try:
                response = await self._client.invoke(tenant, query)
            except TransientQueryError as e:
                logger.warning(str(e))
                raise

            samples = map_response(response, query.metric_names)
            return self._registry.set_many(
                (
                    LabelSet(
                        tenancy=tenant.name,
                        region=tenant.region,
                        namespace=query.namespace,
                        metric=sample.metric,
                        dimension_key=sample.dimension_key,
                        dimension_value=sample.dimension_value,
                    ),
                    sample.value,
                )
                for sample in samples
            )

    def _record(self, result: SweepResult) -> None:
        if not self._telemetry:
            return
        self._telemetry.sweeps_total.inc()
        self._telemetry.sweep_duration_seconds.observe(result.duration_sec)
        self._telemetry.last_sweep_timestamp_seconds.set(result.finished_at.timestamp())
        self._telemetry.published_series.set(len(self._registry))
        if result.evicted:
            self._telemetry.evicted_series_total.inc(result.evicted)
