"""Tests for catalog loading and validation."""

from pathlib import Path

import pytest

from oci_exporter.config_loader import load_metrics, load_tenancies
from oci_exporter.utils.exceptions import ConfigError

REPO_CONFIG = Path(__file__).resolve().parents[1] / "config"

TENANTS_YAML = """
tenancies:
  - name: prod
    tenancy_id: ocid1.tenancy.oc1..prod
    compartment_id: ocid1.compartment.oc1..prod
    region: us-ashburn-1
"""

METRICS_YAML = """
metrics:
  - namespace: oci_computeagent
    names:
      - CpuUtilization
      - MemoryUtilization
  - namespace: oci_lbaas
    names: [Count]
    resource_group: rg1
    resolution: 5m
  - namespace: oci_idle
    names: []
"""


def _write(tmp_path, name, content) -> Path:
    path = tmp_path / name
    path.write_text(content)
    return path


def test_load_tenancies(tmp_path):
    config = load_tenancies(_write(tmp_path, "tenants.yaml", TENANTS_YAML))

    assert len(config.tenancies) == 1
    tenant = config.tenancies[0]
    assert tenant.name == "prod"
    assert tenant.compartment_id == "ocid1.compartment.oc1..prod"
    assert tenant.region == "us-ashburn-1"


def test_load_metrics_preserves_order_and_modifiers(tmp_path):
    config = load_metrics(_write(tmp_path, "metrics.yaml", METRICS_YAML))

    assert [ns.namespace for ns in config.metrics] == ["oci_computeagent", "oci_lbaas", "oci_idle"]
    assert config.metrics[0].names == ("CpuUtilization", "MemoryUtilization")
    assert config.metrics[1].resource_group == "rg1"
    assert config.metrics[1].resolution == "5m"
    assert config.metrics[2].names == ()


def test_shipped_metric_catalog_is_valid():
    config = load_metrics(REPO_CONFIG / "metrics.yaml")
    assert config.metrics[0].namespace == "oci_computeagent"
    assert all(ns.names for ns in config.metrics)


def test_example_tenancy_catalog_is_valid():
    config = load_tenancies(REPO_CONFIG / "tenants.example.yaml")
    assert len(config.tenancies) >= 1


def test_missing_file_is_config_error(tmp_path):
    with pytest.raises(ConfigError, match="Cannot read"):
        load_tenancies(tmp_path / "nope.yaml")


def test_invalid_yaml_is_config_error(tmp_path):
    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_metrics(_write(tmp_path, "metrics.yaml", "metrics: [unclosed"))


def test_non_mapping_document_is_config_error(tmp_path):
    with pytest.raises(ConfigError, match="mapping"):
        load_metrics(_write(tmp_path, "metrics.yaml", "- just a list"))


def test_empty_tenancy_list_is_config_error(tmp_path):
    with pytest.raises(ConfigError, match="tenancies"):
        load_tenancies(_write(tmp_path, "tenants.yaml", "tenancies: []"))


def test_missing_tenancy_field_is_config_error(tmp_path):
    yaml_text = "tenancies:\n  - name: prod\n    tenancy_id: x\n    region: us-ashburn-1\n"
    with pytest.raises(ConfigError, match="compartment_id"):
        load_tenancies(_write(tmp_path, "tenants.yaml", yaml_text))


def test_blank_region_is_config_error(tmp_path):
    yaml_text = TENANTS_YAML.replace("us-ashburn-1", '""')
    with pytest.raises(ConfigError, match="region"):
        load_tenancies(_write(tmp_path, "tenants.yaml", yaml_text))


def test_blank_metric_name_is_config_error(tmp_path):
    yaml_text = "metrics:\n  - namespace: oci_core\n    names: ['VnicBytesIn', '']\n"
    with pytest.raises(ConfigError, match="empty metric name"):
        load_metrics(_write(tmp_path, "metrics.yaml", yaml_text))
