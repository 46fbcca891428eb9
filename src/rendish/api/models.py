"""Response models for the resource queries."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _RemoteModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Team(_RemoteModel):
    """A team (owner) the user belongs to."""

    id: str
    name: str = ""
    email: str | None = None


class Owner(_RemoteModel):
    id: str
    email: str | None = None


class Env(_RemoteModel):
    """Runtime environment (language) of a service."""

    id: str | None = None
    name: str | None = None
    language: str | None = None


class Region(_RemoteModel):
    id: str
    description: str | None = None


class Service(_RemoteModel):
    """A deployed service ("server" in some API operations)."""

    id: str
    name: str = ""
    slug: str | None = None
    type: str | None = None
    state: str | None = None
    suspenders: list[str] | None = None
    user_facing_type: str | None = None
    user_facing_type_slug: str | None = None
    env: Env | None = None
    owner: Owner | None = None
    region: Region | None = None
    updated_at: str | None = None
    ssh_address: str | None = None


class ResourceSummary(_RemoteModel):
    """Any resource inside an environment: service, database or redis."""

    id: str
    name: str = ""
    state: str | None = None
    status: str | None = None
    suspenders: list[str] | None = None


class EnvVar(_RemoteModel):
    id: str | None = None
    key: str
    value: str = ""
    is_file: bool = False


class EnvGroup(_RemoteModel):
    """A named, shared set of environment variables."""

    id: str
    name: str = ""
    owner_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    env_vars: list[EnvVar] = Field(default_factory=list)


class ProjectEnvironment(_RemoteModel):
    id: str
    name: str = ""
    services: list[ResourceSummary] = Field(default_factory=list)
    databases: list[ResourceSummary] = Field(default_factory=list)
    redises: list[ResourceSummary] = Field(default_factory=list)
    env_groups: list[EnvGroup] = Field(default_factory=list)


class Project(_RemoteModel):
    """A project with its environments."""

    id: str
    name: str = ""
    owner: Owner | None = None
    environments: list[ProjectEnvironment] = Field(default_factory=list)

    @property
    def service_count(self) -> int:
        return sum(len(e.services) for e in self.environments)


class MetricSample(_RemoteModel):
    time: str
    memory: float | None = None
    cpu: float | None = None


class MetricSeries(_RemoteModel):
    samples: list[MetricSample] = Field(default_factory=list)


class ServiceMetrics(_RemoteModel):
    """Memory and CPU samples of a service over a history window."""

    env: Env | None = None
    metrics: MetricSeries = Field(default_factory=MetricSeries)


class BandwidthPoint(_RemoteModel):
    time: str
    bandwidth_mb: float = Field(alias="bandwidthMB")


class Bandwidth(_RemoteModel):
    total_mb: float = Field(alias="totalMB")
    points: list[BandwidthPoint] = Field(default_factory=list)


class ServerBandwidth(_RemoteModel):
    """Bandwidth use of a service, in megabytes."""

    id: str
    bandwidth_mb: Bandwidth | None = Field(default=None, alias="bandwidthMB")
