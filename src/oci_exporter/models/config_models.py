from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Tenant(BaseModel):
    """One OCI tenancy to poll. Loaded once from tenants.yaml and never mutated."""

    model_config = ConfigDict(frozen=True)

    name: str
    tenancy_id: str
    compartment_id: str
    region: str

    @model_validator(mode="after")
    def validate_identity(self):
        for field_name in ("name", "tenancy_id", "compartment_id", "region"):
            if not getattr(self, field_name).strip():
                raise ValueError(f"Tenancy field '{field_name}' must not be empty")
        return self


class MetricNamespace(BaseModel):
    """A monitoring namespace and the ordered metric names to request from it."""

    model_config = ConfigDict(frozen=True)

    namespace: str
    names: tuple[str, ...] = ()
    resource_group: str | None = None
    resolution: str | None = None

    @model_validator(mode="after")
    def validate_namespace(self):
        if not self.namespace.strip():
            raise ValueError("Metric namespace must not be empty")
        if any(not name.strip() for name in self.names):
            raise ValueError(f"Namespace '{self.namespace}' contains an empty metric name")
        return self


class TenancyConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    tenancies: tuple[Tenant, ...] = Field(min_length=1)


class MetricConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    metrics: tuple[MetricNamespace, ...] = Field(min_length=1)
