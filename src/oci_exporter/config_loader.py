"""Load and validate the tenancy and metric catalogs."""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeVar

import yaml
from loguru import logger
from pydantic import BaseModel, ValidationError

from oci_exporter.models.config_models import MetricConfig, TenancyConfig
from oci_exporter.utils.exceptions import ConfigError

ModelT = TypeVar("ModelT", bound=BaseModel)


def _read_yaml(path: str | Path) -> Any:
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e


def _validate(model: type[ModelT], data: Any, source: str) -> ModelT:
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: expected a mapping at the top level")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(x) for x in first["loc"])
        raise ConfigError(f"{source}: {loc}: {first['msg']}") from e


def load_tenancies(path: str | Path) -> TenancyConfig:
    config = _validate(TenancyConfig, _read_yaml(path), str(path))
    logger.info(f"Loaded {len(config.tenancies)} tenancies from {path}")
    return config


def load_metrics(path: str | Path) -> MetricConfig:
    config = _validate(MetricConfig, _read_yaml(path), str(path))
    total = sum(len(ns.names) for ns in config.metrics)
    logger.info(f"Loaded {len(config.metrics)} namespaces ({total} metric names) from {path}")
    return config
