import pytest
from prometheus_client import CollectorRegistry

from oci_exporter.collector.query_builder import build_queries, query_window
from oci_exporter.models.config_models import MetricConfig, MetricNamespace, TenancyConfig, Tenant
from oci_exporter.telemetry.exporter_metrics import ExporterTelemetry
from oci_exporter.telemetry.metric_registry import MetricRegistry
from tests.fakes import T0


@pytest.fixture
def tenant() -> Tenant:
    return Tenant(
        name="T",
        tenancy_id="ocid1.tenancy.oc1..t",
        compartment_id="ocid1.tenancy.oc1..t",
        region="us-ashburn-1",
    )


@pytest.fixture
def namespace() -> MetricNamespace:
    return MetricNamespace(namespace="N", names=("A", "B"))


@pytest.fixture
def tenancy_config(tenant) -> TenancyConfig:
    return TenancyConfig(tenancies=(tenant,))


@pytest.fixture
def metric_config(namespace) -> MetricConfig:
    return MetricConfig(metrics=(namespace,))


@pytest.fixture
def query(tenant, namespace):
    return build_queries(tenant, namespace, query_window(T0))[0]


@pytest.fixture
def fresh_registry() -> CollectorRegistry:
    return CollectorRegistry()


@pytest.fixture
def metric_registry(fresh_registry) -> MetricRegistry:
    return MetricRegistry(fresh_registry)


@pytest.fixture
def telemetry(metric_registry) -> ExporterTelemetry:
    return ExporterTelemetry(metric_registry.collector_registry)
