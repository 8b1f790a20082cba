"""Turn a SummarizeMetricsData response into publishable samples."""

from __future__ import annotations

from typing import Mapping, Sequence

from loguru import logger

from oci_exporter.models.monitoring_models import MetricSeries, QueryResponse, Sample

RESOURCE_ID_DIMENSION = "resourceId"


def select_dimension(dimensions: Mapping[str, str]) -> tuple[str, str]:
    """Pick the dimension identifying the resource.

    `resourceId` wins when present and non-empty. Otherwise the non-empty
    dimension with the smallest key is used, so the choice does not depend
    on mapping order. ("", "") when every dimension is empty.
    """
    resource_id = dimensions.get(RESOURCE_ID_DIMENSION)
    if resource_id:
        return RESOURCE_ID_DIMENSION, resource_id
    for key in sorted(dimensions):
        value = dimensions[key]
        if key and value:
            return key, value
    return "", ""


def _metric_name(series: MetricSeries, requested_names: Sequence[str]) -> str | None:
    if series.name:
        return series.name
    if len(requested_names) == 1:
        return requested_names[0]
    return None


def map_series(series: MetricSeries, requested_names: Sequence[str]) -> Sample | None:
    if not series.datapoints:
        return None

    metric = _metric_name(series, requested_names)
    if metric is None:
        logger.warning(f"Dropping unnamed series from multi-metric query {list(requested_names)}")
        return None

    # Last observation wins; datapoints arrive in time order
    latest = series.datapoints[-1]
    dimension_key, dimension_value = select_dimension(series.dimensions)
    return Sample(
        metric=metric,
        dimension_key=dimension_key,
        dimension_value=dimension_value,
        value=latest.value,
    )


def map_response(response: QueryResponse, requested_names: Sequence[str]) -> list[Sample]:
    samples: list[Sample] = []
    skipped = 0
    for series in response.series:
        sample = map_series(series, requested_names)
        if sample is None:
            skipped += 1
            continue
        samples.append(sample)
    if skipped:
        logger.debug(f"Skipped {skipped} series without usable datapoints")
    return samples
