"""Prometheus exporter for OCI Monitoring metrics across multiple tenancies."""

__version__ = "0.1.0"
