"""Tests for MQL query construction."""

from datetime import timedelta

from oci_exporter.collector.query_builder import (
    QueryMode,
    build_queries,
    build_query_text,
    metric_term,
    query_window,
)
from oci_exporter.models.config_models import MetricNamespace
from tests.fakes import T0


def test_metric_term_requests_one_minute_mean():
    assert metric_term("CpuUtilization") == "CpuUtilization[1m].mean()"


def test_query_text_has_one_term_per_name():
    text = build_query_text(["CpuUtilization", "MemoryUtilization"])
    assert text == "CpuUtilization[1m].mean(),MemoryUtilization[1m].mean()"


def test_duplicate_names_produce_one_term_each():
    text = build_query_text(["A", "B", "A"])
    assert text.split(",") == ["A[1m].mean()", "B[1m].mean()", "A[1m].mean()"]


def test_empty_name_list_yields_no_query():
    assert build_query_text([]) is None


def test_query_window_spans_lookback_ending_now():
    start, end = query_window(T0)
    assert end == T0
    assert end - start == timedelta(minutes=5)


def test_query_window_custom_lookback():
    start, end = query_window(T0, timedelta(minutes=10))
    assert end - start == timedelta(minutes=10)


class TestBuildQueries:
    def test_grouped_mode_issues_one_query_per_namespace(self, tenant, namespace):
        window = query_window(T0)
        queries = build_queries(tenant, namespace, window, QueryMode.GROUPED)

        assert len(queries) == 1
        q = queries[0]
        assert q.namespace == "N"
        assert q.metric_names == ("A", "B")
        assert q.query_text == "A[1m].mean(),B[1m].mean()"
        assert q.compartment_id == tenant.compartment_id
        assert q.compartment_id_in_subtree is True
        assert (q.start_time, q.end_time) == window

    def test_per_metric_mode_issues_one_query_per_name(self, tenant, namespace):
        queries = build_queries(tenant, namespace, query_window(T0), QueryMode.PER_METRIC)

        assert [q.metric_names for q in queries] == [("A",), ("B",)]
        assert [q.query_text for q in queries] == ["A[1m].mean()", "B[1m].mean()"]

    def test_namespace_without_names_is_skipped(self, tenant):
        empty = MetricNamespace(namespace="oci_empty", names=())
        assert build_queries(tenant, empty, query_window(T0)) == []

    def test_optional_modifiers_pass_through(self, tenant):
        ns = MetricNamespace(namespace="oci_lbaas", names=("Count",), resource_group="rg1", resolution="5m")
        q = build_queries(tenant, ns, query_window(T0))[0]
        assert q.resource_group == "rg1"
        assert q.resolution == "5m"

    def test_modifiers_default_to_none(self, tenant, namespace):
        q = build_queries(tenant, namespace, query_window(T0))[0]
        assert q.resource_group is None
        assert q.resolution is None
