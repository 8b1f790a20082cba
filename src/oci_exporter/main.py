"""Command-line entry point: load catalogs, build the OCI client and serve /metrics."""

from __future__ import annotations

import argparse
import sys
from datetime import timedelta

import uvicorn
from loguru import logger

from oci_exporter import settings
from oci_exporter.collector.monitoring_client import OCIMonitoringClient
from oci_exporter.collector.pacer import CallPacer
from oci_exporter.collector.query_builder import QueryMode
from oci_exporter.collector.rate_limited_client import RateLimitedClient
from oci_exporter.collector.retry import RetryPolicy
from oci_exporter.collector.scheduler import CollectionScheduler
from oci_exporter.config_loader import load_metrics, load_tenancies
from oci_exporter.server import create_app
from oci_exporter.telemetry.exporter_metrics import ExporterTelemetry
from oci_exporter.telemetry.metric_registry import MetricRegistry
from oci_exporter.utils.exceptions import AuthError, ConfigError
from oci_exporter.utils.logging_utils import configure_logging


def parse_listen_address(address: str) -> tuple[str, int]:
    """':8080' -> ('0.0.0.0', 8080); '127.0.0.1:9100' -> ('127.0.0.1', 9100)."""
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ConfigError(f"Invalid listen address '{address}', expected [host]:port")
    return host or "0.0.0.0", int(port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export OCI Monitoring metrics for multiple tenancies to Prometheus")
    parser.add_argument("--config", default=settings.OCI_CONFIG_FILE, help="Path to OCI API config file")
    parser.add_argument("--profile", default=settings.OCI_CONFIG_PROFILE, help="Profile within the OCI config file")
    parser.add_argument(
        "--auth",
        choices=["config_file", "instance_principal"],
        default=settings.OCI_AUTH,
        help="How to authenticate against OCI",
    )
    parser.add_argument("--listen-address", default=settings.LISTEN_ADDRESS, help="Exporter listen address")
    parser.add_argument("--tenants-file", default=settings.TENANTS_FILE, help="Tenancy catalog (YAML)")
    parser.add_argument("--metrics-file", default=settings.METRICS_FILE, help="Metric catalog (YAML)")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Log level")
    return parser


def build_client(args: argparse.Namespace) -> OCIMonitoringClient:
    if args.auth == "instance_principal":
        return OCIMonitoringClient.from_instance_principal()
    return OCIMonitoringClient.from_config_file(args.config, args.profile)


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        host, port = parse_listen_address(args.listen_address)
        tenancies = load_tenancies(args.tenants_file)
        metrics = load_metrics(args.metrics_file)
        if settings.LOOKBACK_MINUTES <= 1:
            raise ConfigError("LOOKBACK_MINUTES must exceed the 1m aggregation interval")
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    try:
        mode = QueryMode(settings.QUERY_MODE)
    except ValueError:
        logger.error(f"Invalid QUERY_MODE '{settings.QUERY_MODE}', expected one of {[m.value for m in QueryMode]}")
        sys.exit(1)

    try:
        oci_client = build_client(args)
    except AuthError as e:
        logger.error(f"Authentication error: {e}")
        sys.exit(1)

    registry = MetricRegistry()
    telemetry = ExporterTelemetry(registry.collector_registry)
    client = RateLimitedClient(
        oci_client,
        pacer=CallPacer(settings.MIN_CALL_SPACING_SEC),
        retry_policy=RetryPolicy(max_attempts=settings.MAX_QUERY_ATTEMPTS),
        telemetry=telemetry,
    )
    scheduler = CollectionScheduler(
        client,
        registry,
        tenancies,
        metrics,
        interval_sec=settings.SWEEP_INTERVAL_SEC,
        lookback=timedelta(minutes=settings.LOOKBACK_MINUTES),
        mode=mode,
        max_concurrency=settings.MAX_CONCURRENT_QUERIES,
        stale_ttl_sec=settings.STALE_SERIES_TTL_SEC,
        telemetry=telemetry,
    )

    app = create_app(registry, scheduler)
    logger.info(f"Exporter running on {host}:{port}")
    uvicorn.run(app, host=host, port=port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
