"""Self-metrics describing the exporter's own collection loop."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

PREFIX = "oci_exporter_"


class ExporterTelemetry:
    def __init__(self, registry: CollectorRegistry):
        # --- Sweeps ---
        self.sweeps_total = Counter(
            f"{PREFIX}sweeps_total",
            "Total collection sweeps completed",
            registry=registry,
        )
        self.sweep_duration_seconds = Histogram(
            f"{PREFIX}sweep_duration_seconds",
            "Wall-clock duration of one collection sweep",
            buckets=[1.0, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0],
            registry=registry,
        )
        self.last_sweep_timestamp_seconds = Gauge(
            f"{PREFIX}last_sweep_timestamp_seconds",
            "Unix time at which the last sweep finished",
            registry=registry,
        )

        # --- Queries ---
        self.queries_total = Counter(
            f"{PREFIX}queries_total",
            "Monitoring queries issued, by outcome",
            labelnames=["tenancy", "namespace", "status"],
            registry=registry,
        )
        self.query_retries_total = Counter(
            f"{PREFIX}query_retries_total",
            "Retries caused by provider rate limiting",
            labelnames=["tenancy", "namespace"],
            registry=registry,
        )

        # --- Published series ---
        self.published_series = Gauge(
            f"{PREFIX}published_series",
            "Number of label sets currently published",
            registry=registry,
        )
        self.evicted_series_total = Counter(
            f"{PREFIX}evicted_series_total",
            "Label sets dropped by stale-series eviction",
            registry=registry,
        )
