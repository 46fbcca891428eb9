"""Resource queries against the remote API."""

from __future__ import annotations

import structlog

from rendish.graphql_client import GraphQlClient, ProtocolError, decode_field
from rendish.session import User

from . import templates
from .exceptions import ApiError, ApiErrorCodes
from .models import Bandwidth, EnvGroup, MetricSample, Project, ServerBandwidth, Service, ServiceMetrics, Team

logger = structlog.stdlib.get_logger(__name__)

SERVICE_ID_PREFIX = "srv-"
ENV_GROUP_ID_PREFIX = "evg-"
PROJECT_ID_PREFIX = "prj-"

DEFAULT_METRICS_HISTORY_MINUTES = 720
DEFAULT_METRICS_STEP_SECONDS = 60


class RenderApiClient:
    """Typed wrappers around the listing operations.

    Every call is one request through ``client`` authenticated with ``token``.
    Response fields are validated here; a mismatch raises ``ProtocolError``.
    """

    def __init__(self, client: GraphQlClient, token: str) -> None:
        self._client = client
        self._token = token

    async def fetch_teams(self, user_id: str) -> list[Team]:
        data = await self._client.execute(templates.teams_for_user(user_id), self._token)
        return decode_field(data, "teamsForUser", list[Team])

    async def default_team(self, user: User) -> Team:
        """The first team of ``user``; the CLI acts on it implicitly."""
        teams = await self.fetch_teams(user.id)
        if not teams:
            raise ApiError(ApiErrorCodes.NO_TEAM, f"User {user.email} does not belong to any team")
        return teams[0]

    async def fetch_projects(self, owner_id: str) -> list[Project]:
        data = await self._client.execute(templates.projects(owner_id), self._token)
        return decode_field(data, "projects", list[Project])

    async def fetch_project_resources(self, project_id: str) -> Project:
        """One project with the services, databases, redises and env groups of each environment."""
        data = await self._client.execute(templates.project_resources(project_id), self._token)
        return decode_field(data, "project", Project)

    async def fetch_services(self, owner_id: str) -> list[Service]:
        data = await self._client.execute(templates.services_for_owner(owner_id), self._token)
        return decode_field(data, "servicesForOwner", list[Service])

    async def fetch_env_groups(self, owner_id: str) -> list[EnvGroup]:
        data = await self._client.execute(templates.env_groups_for_owner(owner_id), self._token)
        return decode_field(data, "envGroupsForOwner", list[EnvGroup])

    async def fetch_env_group(self, env_group_id: str) -> EnvGroup:
        data = await self._client.execute(templates.env_group(env_group_id), self._token)
        return decode_field(data, "envGroup", EnvGroup)

    async def fetch_env_group_services(self, env_group_id: str) -> list[Service]:
        data = await self._client.execute(
            templates.services_for_env_group(env_group_id), self._token
        )
        return decode_field(data, "servicesForEnvGroup", list[Service])

    async def fetch_service_metrics(
        self,
        service_id: str,
        history_minutes: int = DEFAULT_METRICS_HISTORY_MINUTES,
        step: int = DEFAULT_METRICS_STEP_SECONDS,
    ) -> list[MetricSample]:
        data = await self._client.execute(
            templates.service_metrics(service_id, history_minutes, step), self._token
        )
        return decode_field(data, "service", ServiceMetrics).metrics.samples

    async def fetch_service_bandwidth(self, service_id: str) -> Bandwidth:
        data = await self._client.execute(templates.server_bandwidth(service_id), self._token)
        server = decode_field(data, "server", ServerBandwidth)
        if server.bandwidth_mb is None:
            raise ProtocolError(f"Response has no bandwidth for service {service_id}")
        return server.bandwidth_mb

    async def find_service(self, owner_id: str, id_or_name: str) -> Service | None:
        """Look a service up by id (``srv-`` prefix) or by exact name."""
        services = await self.fetch_services(owner_id)
        if id_or_name.startswith(SERVICE_ID_PREFIX):
            match = [s for s in services if s.id == id_or_name]
        else:
            match = [s for s in services if s.name == id_or_name]
        logger.debug("api.find_service", query=id_or_name, candidates=len(services), found=bool(match))
        return match[0] if match else None

    async def find_env_group(self, owner_id: str, id_or_name: str) -> EnvGroup | None:
        """Look an env group up by id (``evg-`` prefix) or by exact name."""
        groups = await self.fetch_env_groups(owner_id)
        if id_or_name.startswith(ENV_GROUP_ID_PREFIX):
            match = [g for g in groups if g.id == id_or_name]
        else:
            match = [g for g in groups if g.name == id_or_name]
        return match[0] if match else None

    async def find_project(self, owner_id: str, id_or_name: str) -> Project | None:
        """Look a project up by id (``prj-`` prefix) or by exact name."""
        projects = await self.fetch_projects(owner_id)
        if id_or_name.startswith(PROJECT_ID_PREFIX):
            match = [p for p in projects if p.id == id_or_name]
        else:
            match = [p for p in projects if p.name == id_or_name]
        return match[0] if match else None
