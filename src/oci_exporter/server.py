"""HTTP surface: Prometheus scrape endpoint plus a health check."""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel

from oci_exporter import __version__
from oci_exporter.collector.scheduler import CollectionScheduler
from oci_exporter.telemetry.metric_registry import MetricRegistry


class SweepSummary(BaseModel):
    jobs: int
    failures: int
    samples: int
    duration_sec: float
    finished_at: datetime | None = None


class HealthResponse(BaseModel):
    status: str
    version: str
    published_series: int
    last_sweep: SweepSummary | None = None


def create_app(registry: MetricRegistry, scheduler: CollectionScheduler | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if scheduler is not None:
            await scheduler.start()
        try:
            yield
        finally:
            if scheduler is not None:
                await scheduler.stop()

    app = FastAPI(title="OCI Monitoring Exporter", version=__version__, lifespan=lifespan)

    # Plain def: FastAPI runs it in the threadpool, so a scrape never waits on the event loop
    @app.get("/metrics")
    def metrics() -> Response:
        return Response(content=generate_latest(registry.collector_registry), media_type=CONTENT_TYPE_LATEST)

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        last = scheduler.last_result if scheduler is not None else None
        return HealthResponse(
            status="ok",
            version=__version__,
            published_series=len(registry),
            last_sweep=SweepSummary(
                jobs=last.jobs,
                failures=last.failures,
                samples=last.samples,
                duration_sec=last.duration_sec,
                finished_at=last.finished_at,
            )
            if last is not None
            else None,
        )

    return app
