"""RenderApiClient unit tests."""

import pytest

from rendish.api import ApiError, ApiErrorCodes, RenderApiClient
from rendish.graphql_client import InMemoryGraphQlClient, ProtocolError
from rendish.session import User

USER = User(id="usr-1", email="dev@example.com")

SERVICES = [
    {
        "id": "srv-aaa",
        "name": "web",
        "slug": "web-x1",
        "state": "Running",
        "userFacingTypeSlug": "web",
        "env": {"id": "python", "name": "Python 3", "language": "python", "__typename": "Env"},
        "owner": {"id": "tea-2", "email": "team@example.com"},
        "region": {"id": "frankfurt", "description": "Frankfurt (EU Central)"},
    },
    {"id": "srv-bbb", "name": "worker", "owner": None},
]


def make_api(client: InMemoryGraphQlClient) -> RenderApiClient:
    return RenderApiClient(client, "tok")


async def test_default_team_is_first() -> None:
    client = InMemoryGraphQlClient()
    client.set_response(
        "teamsForUserMinimal",
        {"teamsForUser": [{"id": "tea-1", "name": "one"}, {"id": "tea-2", "name": "two"}]},
    )
    team = await make_api(client).default_team(USER)
    assert team.id == "tea-1"
    query, token = client.calls[0]
    assert query.variables == {"userId": "usr-1"}
    assert token == "tok"


async def test_default_team_none() -> None:
    client = InMemoryGraphQlClient()
    client.set_response("teamsForUserMinimal", {"teamsForUser": []})
    with pytest.raises(ApiError) as exc_info:
        await make_api(client).default_team(USER)
    assert exc_info.value.code == ApiErrorCodes.NO_TEAM


async def test_fetch_services_models() -> None:
    client = InMemoryGraphQlClient()
    client.set_response("servicesForOwner", {"servicesForOwner": SERVICES})
    services = await make_api(client).fetch_services("tea-1")
    assert [s.id for s in services] == ["srv-aaa", "srv-bbb"]
    assert services[0].user_facing_type_slug == "web"
    assert services[0].env.name == "Python 3"
    assert services[0].owner.id == "tea-2"
    assert services[1].env is None


async def test_fetch_services_shape_mismatch() -> None:
    client = InMemoryGraphQlClient()
    client.set_response("servicesForOwner", {"servicesForOwner": [{"name": "no id"}]})
    with pytest.raises(ProtocolError):
        await make_api(client).fetch_services("tea-1")


@pytest.mark.parametrize(
    ("needle", "expected"),
    [("srv-bbb", "srv-bbb"), ("web", "srv-aaa"), ("srv-zzz", None), ("missing", None)],
)
async def test_find_service(needle: str, expected: str | None) -> None:
    client = InMemoryGraphQlClient()
    client.set_response("servicesForOwner", {"servicesForOwner": SERVICES})
    found = await make_api(client).find_service("tea-1", needle)
    assert (found.id if found else None) == expected


async def test_fetch_projects_service_count() -> None:
    client = InMemoryGraphQlClient()
    client.set_response(
        "projects",
        {
            "projects": [
                {
                    "id": "prj-1",
                    "name": "shop",
                    "environments": [
                        {"id": "env-1", "name": "prod", "services": [{"id": "srv-a"}, {"id": "srv-b"}]},
                        {"id": "env-2", "name": "staging", "services": [{"id": "srv-c"}]},
                    ],
                }
            ]
        },
    )
    api = make_api(client)
    (project,) = await api.fetch_projects("tea-1")
    assert project.service_count == 3
    assert client.calls[0][0].variables == {"filter": {"ownerId": "tea-1"}}


async def test_env_groups() -> None:
    client = InMemoryGraphQlClient()
    group = {
        "id": "evg-1",
        "name": "shared",
        "ownerId": "tea-1",
        "envVars": [{"id": "ev-1", "key": "DEBUG", "value": "1", "isFile": False}],
    }
    client.set_response("envGroupsForOwner", {"envGroupsForOwner": [group]})
    client.set_response("envGroup", {"envGroup": group})
    client.set_response("servicesForEnvGroup", {"servicesForEnvGroup": SERVICES[:1]})
    api = make_api(client)

    assert (await api.find_env_group("tea-1", "shared")).id == "evg-1"
    assert (await api.find_env_group("tea-1", "evg-1")).name == "shared"
    assert await api.find_env_group("tea-1", "evg-2") is None

    fetched = await api.fetch_env_group("evg-1")
    assert [(v.key, v.value) for v in fetched.env_vars] == [("DEBUG", "1")]
    assert [s.name for s in await api.fetch_env_group_services("evg-1")] == ["web"]


@pytest.mark.parametrize(
    ("needle", "expected"),
    [("prj-2", "prj-2"), ("shop", "prj-1"), ("prj-9", None), ("blog", None)],
)
async def test_find_project(needle: str, expected: str | None) -> None:
    client = InMemoryGraphQlClient()
    client.set_response(
        "projects",
        {"projects": [{"id": "prj-1", "name": "shop"}, {"id": "prj-2", "name": "prj-1"}]},
    )
    found = await make_api(client).find_project("tea-1", needle)
    assert (found.id if found else None) == expected


async def test_fetch_project_resources() -> None:
    client = InMemoryGraphQlClient()
    client.set_response(
        "projectResources",
        {
            "project": {
                "id": "prj-1",
                "name": "shop",
                "owner": {"id": "tea-1"},
                "environments": [
                    {
                        "id": "env-1",
                        "name": "production",
                        "services": SERVICES,
                        "databases": [{"id": "dpg-1", "name": "db", "status": "AVAILABLE", "suspenders": []}],
                        "redises": [{"id": "red-1", "name": "cache", "status": "AVAILABLE"}],
                        "envGroups": [{"id": "evg-1", "name": "shared", "envVars": []}],
                    }
                ],
            }
        },
    )
    project = await make_api(client).fetch_project_resources("prj-1")
    (env,) = project.environments
    assert [s.id for s in env.services] == ["srv-aaa", "srv-bbb"]
    assert env.databases[0].status == "AVAILABLE"
    assert env.redises[0].name == "cache"
    assert env.env_groups[0].name == "shared"
    assert client.calls[0][0].variables == {"id": "prj-1"}


async def test_fetch_service_metrics() -> None:
    client = InMemoryGraphQlClient()
    samples = [
        {"time": "2024-05-01T11:00:00Z", "memory": 120.5, "cpu": 0.25},
        {"time": "2024-05-01T11:01:00Z", "memory": None, "cpu": None},
    ]
    client.set_response("serviceMetrics", {"service": {"env": {"id": "python"}, "metrics": {"samples": samples}}})
    result = await make_api(client).fetch_service_metrics("srv-aaa")
    assert [(s.memory, s.cpu) for s in result] == [(120.5, 0.25), (None, None)]
    assert client.calls[0][0].variables == {"serviceId": "srv-aaa", "historyMinutes": 720, "step": 60}


async def test_fetch_service_bandwidth() -> None:
    client = InMemoryGraphQlClient()
    client.set_response(
        "serverBandwidth",
        {
            "server": {
                "id": "srv-aaa",
                "bandwidthMB": {
                    "totalMB": 5.0,
                    "points": [{"time": "2024-05-01", "bandwidthMB": 2.0}, {"time": "2024-05-02", "bandwidthMB": 3.0}],
                },
            }
        },
    )
    bandwidth = await make_api(client).fetch_service_bandwidth("srv-aaa")
    assert bandwidth.total_mb == 5.0
    assert [p.bandwidth_mb for p in bandwidth.points] == [2.0, 3.0]
    assert client.calls[0][0].variables == {"serverId": "srv-aaa"}


async def test_fetch_service_bandwidth_missing() -> None:
    client = InMemoryGraphQlClient()
    client.set_response("serverBandwidth", {"server": {"id": "srv-aaa", "bandwidthMB": None}})
    with pytest.raises(ProtocolError):
        await make_api(client).fetch_service_bandwidth("srv-aaa")
