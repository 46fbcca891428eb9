"""Command tree tests (click CliRunner, in-memory clients)."""

import json
import subprocess
from pathlib import Path

import pytest
from click.testing import CliRunner

from rendish.api import ApiError
from rendish.cli import app
from rendish.cli.app import cli
from rendish.config import CONFIG_DIR_ENV, ConfigError
from rendish.errors import RendishError
from rendish.graphql_client import InMemoryGraphQlClient, ProtocolError, RequestError
from rendish.log_stream import InMemoryWsClient, LogStreamError
from rendish.session import Session, SessionError, SessionStore, User

USER = {"id": "usr-1", "email": "dev@example.com"}

KA = json.dumps({"type": "ka"})


def log_message(log_id: str, text: str) -> str:
    return json.dumps(
        {
            "type": "data",
            "id": "1",
            "payload": {
                "data": {
                    "logAdded": {"id": log_id, "timestamp": "2024-05-01T11:58:00Z", "text": text, "labels": []}
                }
            },
        }
    )


@pytest.fixture
def config_dir(tmp_path, monkeypatch) -> Path:
    monkeypatch.setenv(CONFIG_DIR_ENV, str(tmp_path))
    return tmp_path


@pytest.fixture
def graphql(monkeypatch) -> InMemoryGraphQlClient:
    client = InMemoryGraphQlClient()
    client.set_response("teamsForUserMinimal", {"teamsForUser": [{"id": "tea-1", "name": "mine"}]})
    monkeypatch.setattr(app, "make_graphql_client", lambda config: client)
    return client


@pytest.fixture
def transport(monkeypatch) -> InMemoryWsClient:
    ws = InMemoryWsClient()
    monkeypatch.setattr(app, "make_transport", lambda config: ws)
    return ws


@pytest.fixture
def signed_in(config_dir: Path) -> Session:
    session = Session(id_token="tok-saved", expires_at="2999-01-01T00:00:00Z", user=User.model_validate(USER))
    SessionStore(config_dir / "token.json").save(session)
    return session


def invoke(*args: str, input: str | None = None):
    return CliRunner().invoke(cli, list(args), input=input)


def test_version() -> None:
    result = invoke("--version")
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_auth_login(config_dir: Path, graphql: InMemoryGraphQlClient) -> None:
    auth = {"idToken": "tok-challenge", "expiresAt": "2999-01-01T00:00:00Z", "user": USER}
    graphql.set_response("signIn", {"signIn": auth})
    graphql.set_response("verifyOneTimePassword", {"verifyOneTimePassword": {**auth, "idToken": "tok-final"}})

    result = invoke("auth", "login", input="dev@example.com\nhunter2\n123456\n")

    assert result.exit_code == 0, result.output
    assert "Signed in as dev@example.com" in result.stdout
    saved = json.loads((config_dir / "token.json").read_text(encoding="utf-8"))
    assert saved["idToken"] == "tok-final"
    assert graphql.calls[1][1] == "tok-challenge"


def test_auth_login_bad_code(config_dir: Path, graphql: InMemoryGraphQlClient) -> None:
    auth = {"idToken": "tok-challenge", "expiresAt": "2999-01-01T00:00:00Z", "user": USER}
    graphql.set_response("signIn", {"signIn": auth})
    graphql.set_error("verifyOneTimePassword", ProtocolError('Request failure: [{"message": "invalid code"}]'))

    result = invoke("auth", "login", input="dev@example.com\nhunter2\n000000\n")

    assert result.exit_code == 1
    assert "invalid code" in result.output
    assert not (config_dir / "token.json").exists()


def test_auth_show(signed_in: Session) -> None:
    result = invoke("--json", "auth", "show")
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["idToken"] == "tok-saved"


def test_auth_show_without_session(config_dir: Path) -> None:
    result = invoke("auth", "show")
    assert result.exit_code == 1
    assert "No valid session" in result.output


def test_auth_show_corrupt_cache(config_dir: Path) -> None:
    (config_dir / "token.json").write_text("garbage", encoding="utf-8")
    result = invoke("auth", "show")
    assert result.exit_code == 1
    assert "CORRUPT_CACHE" in result.output


def test_auth_logout(config_dir: Path, signed_in: Session) -> None:
    result = invoke("auth", "logout")
    assert result.exit_code == 0
    assert not (config_dir / "token.json").exists()


def test_services_list_json(signed_in: Session, graphql: InMemoryGraphQlClient) -> None:
    graphql.set_response(
        "servicesForOwner",
        {"servicesForOwner": [{"id": "srv-1", "name": "web", "state": "Running", "userFacingTypeSlug": "web"}]},
    )
    result = invoke("--json", "services", "list")
    assert result.exit_code == 0, result.output
    (row,) = json.loads(result.stdout)
    assert row["name"] == "web"
    assert row["id"] == "srv-1"
    assert all(token == "tok-saved" for _, token in graphql.calls)


def test_services_list_table(signed_in: Session, graphql: InMemoryGraphQlClient) -> None:
    graphql.set_response("servicesForOwner", {"servicesForOwner": [{"id": "srv-1", "name": "web"}]})
    result = invoke("services", "list")
    assert result.exit_code == 0, result.output
    assert "srv-1" in result.stdout
    assert "name" in result.stdout


def test_request_error_exits_one(signed_in: Session, graphql: InMemoryGraphQlClient) -> None:
    graphql.set_error("servicesForOwner", ProtocolError('Request failure: [{"message": "boom"}]'))
    result = invoke("services", "list")
    assert result.exit_code == 1
    assert "PROTOCOL_ERROR" in result.output


def test_projects_list(signed_in: Session, graphql: InMemoryGraphQlClient) -> None:
    graphql.set_response(
        "projects",
        {"projects": [{"id": "prj-1", "name": "shop", "environments": [{"id": "env-1", "services": [{"id": "srv-1"}]}]}]},
    )
    result = invoke("--json", "projects", "list")
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == [{"name": "shop", "id": "prj-1", "environments": 1, "services": 1}]


def test_env_groups_vars(signed_in: Session, graphql: InMemoryGraphQlClient) -> None:
    group = {"id": "evg-1", "name": "shared", "envVars": [{"key": "DEBUG", "value": "1"}]}
    graphql.set_response("envGroupsForOwner", {"envGroupsForOwner": [group]})
    graphql.set_response("envGroup", {"envGroup": group})
    result = invoke("--json", "env-groups", "vars", "shared")
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == [{"key": "DEBUG", "value": "1"}]


def test_env_groups_unknown(signed_in: Session, graphql: InMemoryGraphQlClient) -> None:
    graphql.set_response("envGroupsForOwner", {"envGroupsForOwner": []})
    result = invoke("env-groups", "services", "nope")
    assert result.exit_code == 1
    assert "NOT_FOUND" in result.output


def test_logs_tail(signed_in: Session, graphql: InMemoryGraphQlClient, transport: InMemoryWsClient) -> None:
    graphql.set_response(
        "servicesForOwner",
        {"servicesForOwner": [{"id": "srv-1", "name": "web", "owner": {"id": "tea-9"}}]},
    )
    for raw in (KA, log_message("l1", "booting"), KA, log_message("l2", "ready")):
        transport.inject_message(raw)

    result = invoke("logs", "tail", "web", "--region", "frankfurt", "--page-size", "20")

    assert result.exit_code == 0, result.output
    assert result.stdout.splitlines() == ["2024-05-01T11:58:00Z booting", "2024-05-01T11:58:00Z ready"]
    assert transport.token == "tok-saved"
    start = json.loads(transport.get_sent_messages()[1])
    query = start["payload"]["variables"]["query"]
    assert query["ownerId"] == "tea-9"
    assert query["region"] == "frankfurt"
    assert query["pageSize"] == 20
    assert query["filters"][0]["values"] == ["srv-1"]


def test_logs_tail_unknown_service(signed_in: Session, graphql: InMemoryGraphQlClient) -> None:
    graphql.set_response("servicesForOwner", {"servicesForOwner": []})
    result = invoke("logs", "tail", "srv-missing")
    assert result.exit_code == 1
    assert "Unable to find service" in result.output


def test_bad_config_file(config_dir: Path) -> None:
    (config_dir / "config.yaml").write_text("logs: [\n", encoding="utf-8")
    result = invoke("auth", "show")
    assert result.exit_code == 1
    assert "PARSE_YAML_ERROR" in result.output


def test_auth_show_with_default_log_level(signed_in: Session) -> None:
    result = invoke("auth", "show")
    assert result.exit_code == 0, result.output
    assert "dev@example.com" in result.stdout


def test_log_level_option(signed_in: Session) -> None:
    result = invoke("--log-level", "DEBUG", "--json", "auth", "show")
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["idToken"] == "tok-saved"


def test_bad_config_file_leaves_stdout_clean(config_dir: Path) -> None:
    (config_dir / "config.yaml").write_text("observability: 3\n", encoding="utf-8")
    result = invoke("auth", "show")
    assert result.exit_code == 1
    assert result.stdout == ""
    assert "VALIDATION_ERROR" in result.stderr


def test_dashboard_flag_opens_browser(monkeypatch) -> None:
    opened: list[str] = []
    monkeypatch.setattr(app.click, "launch", opened.append)
    result = invoke("--dash")
    assert result.exit_code == 0, result.output
    assert opened == [app.DASHBOARD_URL]


WEB = {"id": "srv-1", "name": "web", "owner": {"id": "tea-9"}, "sshAddress": "srv-1@ssh.oregon.render.com"}


def test_services_metrics(signed_in: Session, graphql: InMemoryGraphQlClient) -> None:
    graphql.set_response("servicesForOwner", {"servicesForOwner": [WEB]})
    graphql.set_response(
        "serviceMetrics",
        {"service": {"metrics": {"samples": [{"time": "2024-05-01T11:00:00Z", "memory": 120.5, "cpu": 0.25}]}}},
    )
    result = invoke("--json", "services", "metrics", "web", "--minutes", "60", "--step", "30")
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == [{"time": "2024-05-01T11:00:00Z", "memory": 120.5, "cpu": 0.25}]
    query, _ = graphql.calls[-1]
    assert query.variables == {"serviceId": "srv-1", "historyMinutes": 60, "step": 30}


def test_services_bandwidth(signed_in: Session, graphql: InMemoryGraphQlClient) -> None:
    graphql.set_response("servicesForOwner", {"servicesForOwner": [WEB]})
    graphql.set_response(
        "serverBandwidth",
        {
            "server": {
                "id": "srv-1",
                "bandwidthMB": {"totalMB": 3.5, "points": [{"time": "2024-05-01", "bandwidthMB": 3.5}]},
            }
        },
    )
    result = invoke("services", "bandwidth", "srv-1")
    assert result.exit_code == 0, result.output
    assert "2024-05-01" in result.stdout
    assert "bandwidth" in result.stdout


def test_services_ssh(signed_in: Session, graphql: InMemoryGraphQlClient, monkeypatch) -> None:
    graphql.set_response("servicesForOwner", {"servicesForOwner": [WEB]})
    commands: list[list[str]] = []

    def fake_run(command: list[str]) -> subprocess.CompletedProcess:
        commands.append(command)
        return subprocess.CompletedProcess(command, 3)

    monkeypatch.setattr(app.subprocess, "run", fake_run)
    result = invoke("services", "ssh", "web", "-v", "uptime")
    assert result.exit_code == 3
    assert commands == [["ssh", "srv-1@ssh.oregon.render.com", "-v", "uptime"]]


def test_services_ssh_without_address(signed_in: Session, graphql: InMemoryGraphQlClient) -> None:
    graphql.set_response("servicesForOwner", {"servicesForOwner": [{**WEB, "sshAddress": None}]})
    result = invoke("services", "ssh", "web")
    assert result.exit_code == 1
    assert "NO_SSH_ADDRESS" in result.stderr


def test_projects_list_envs(signed_in: Session, graphql: InMemoryGraphQlClient) -> None:
    graphql.set_response("projects", {"projects": [{"id": "prj-1", "name": "shop"}]})
    graphql.set_response(
        "projectResources",
        {
            "project": {
                "id": "prj-1",
                "name": "shop",
                "environments": [
                    {
                        "id": "env-1",
                        "name": "production",
                        "services": [{"id": "srv-1", "name": "web"}],
                        "databases": [{"id": "dpg-1", "name": "db", "status": "AVAILABLE"}],
                        "redises": [],
                        "envGroups": [{"id": "evg-1", "name": "shared"}],
                    }
                ],
            }
        },
    )
    result = invoke("--json", "projects", "list-envs", "shop")
    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == [
        {"name": "production", "id": "env-1", "services": 1, "databases": 1, "redises": 0, "env groups": 1}
    ]
    query, _ = graphql.calls[-1]
    assert query.variables == {"id": "prj-1"}


def test_projects_list_envs_unknown(signed_in: Session, graphql: InMemoryGraphQlClient) -> None:
    graphql.set_response("projects", {"projects": []})
    result = invoke("projects", "list-envs", "prj-missing")
    assert result.exit_code == 1
    assert "NOT_FOUND" in result.stderr


@pytest.mark.parametrize("error", [ApiError, ConfigError, LogStreamError, RequestError, SessionError])
def test_package_errors_share_base(error: type[RendishError]) -> None:
    err = error("SOME_CODE", "went wrong")
    assert isinstance(err, RendishError)
    assert str(err) == "SOME_CODE: went wrong"
