from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

LABEL_NAMES = ("tenancy", "region", "namespace", "metric", "dimension_key", "dimension_value")


class Query(BaseModel):
    """A single SummarizeMetricsData request, rebuilt on every sweep."""

    model_config = ConfigDict(frozen=True)

    namespace: str
    query_text: str
    metric_names: tuple[str, ...]
    compartment_id: str
    compartment_id_in_subtree: bool = True
    start_time: datetime
    end_time: datetime
    resource_group: str | None = None
    resolution: str | None = None


class Datapoint(BaseModel):
    timestamp: datetime
    value: float


class MetricSeries(BaseModel):
    """One returned series: a metric name, the resource dimensions and its time-ordered datapoints."""

    name: str | None = None
    dimensions: dict[str, str] = Field(default_factory=dict)
    datapoints: list[Datapoint] = Field(default_factory=list)


class QueryResponse(BaseModel):
    series: list[MetricSeries] = Field(default_factory=list)


class Sample(BaseModel):
    model_config = ConfigDict(frozen=True)

    metric: str
    dimension_key: str
    dimension_value: str
    value: float


class LabelSet(BaseModel):
    """Identity of one published value. Hashable so it can key the registry."""

    model_config = ConfigDict(frozen=True)

    tenancy: str
    region: str
    namespace: str
    metric: str
    dimension_key: str
    dimension_value: str

    def label_values(self) -> list[str]:
        """Label values in LABEL_NAMES order."""
        return [getattr(self, name) for name in LABEL_NAMES]
