"""Resource queries: teams, projects, services, env groups and service metrics."""

from .client import RenderApiClient
from .exceptions import ApiError, ApiErrorCodes
from .models import (
    Bandwidth,
    BandwidthPoint,
    Env,
    EnvGroup,
    EnvVar,
    MetricSample,
    MetricSeries,
    Owner,
    Project,
    ProjectEnvironment,
    Region,
    ResourceSummary,
    ServerBandwidth,
    Service,
    ServiceMetrics,
    Team,
)

__all__ = [
    "ApiError",
    "ApiErrorCodes",
    "Bandwidth",
    "BandwidthPoint",
    "Env",
    "EnvGroup",
    "EnvVar",
    "MetricSample",
    "MetricSeries",
    "Owner",
    "Project",
    "ProjectEnvironment",
    "Region",
    "RenderApiClient",
    "ResourceSummary",
    "ServerBandwidth",
    "Service",
    "ServiceMetrics",
    "Team",
]
