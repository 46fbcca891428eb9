"""rendish command tree.

This module is the process boundary: every known error kind is turned into a
red message on stderr and a non-zero exit code here, and nowhere else.
"""

from __future__ import annotations

import asyncio
import subprocess
from collections.abc import Coroutine, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeVar

import click
import structlog

from rendish import __version__
from rendish.api import ApiError, ApiErrorCodes, RenderApiClient, Service
from rendish.api.client import DEFAULT_METRICS_HISTORY_MINUTES, DEFAULT_METRICS_STEP_SECONDS
from rendish.config import AppConfig, config_dir, load
from rendish.errors import RendishError
from rendish.graphql_client import GraphQlClient, HttpGraphQlClient
from rendish.log_stream import LogQuery, LogStreamClient, WebsocketsWsClient, WsClient
from rendish.session import Credential, Session, SessionManager, SessionStore
from rendish.telemetry import new_logger

from . import exit_codes
from .render import display, print_error, print_json

T = TypeVar("T")

logger = structlog.stdlib.get_logger(__name__)

DASHBOARD_URL = "https://rndr.in/c/dashboard"

OAUTH_NOTICE = (
    "If you normally log in to render via oauth, you will need to go into "
    "account settings and add a password to your account\n"
)


def make_graphql_client(config: AppConfig) -> GraphQlClient:
    return HttpGraphQlClient(config.graphql_config())


def make_transport(config: AppConfig) -> WsClient:
    return WebsocketsWsClient(config.ws_config())


@dataclass
class AppContext:
    config: AppConfig
    config_dir: Path
    as_json: bool = False

    def session_manager(self) -> SessionManager:
        store = SessionStore(self.config.session_cache_path(self.config_dir))
        return SessionManager(make_graphql_client(self.config), store)

    def api(self, session: Session) -> RenderApiClient:
        return RenderApiClient(make_graphql_client(self.config), session.id_token)


def prompt_credential() -> Credential:
    click.echo(OAUTH_NOTICE, err=True)
    identifier = click.prompt("username", err=True)
    secret = click.prompt("password", hide_input=True, err=True)
    return Credential(identifier=identifier, secret=secret)


def prompt_code() -> str:
    return click.prompt("TOTP code", err=True)


@contextmanager
def error_boundary() -> Iterator[None]:
    """Translate known errors into a message and an exit code."""
    ctx = click.get_current_context()
    try:
        yield
    except RendishError as e:
        logger.debug("command.failed", error=type(e).__name__, code=e.code)
        print_error(str(e))
        ctx.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        print_error("Aborted by user.")
        ctx.exit(exit_codes.KEYBOARD_INTERRUPT)


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run one async command body inside the error boundary."""
    with error_boundary():
        return asyncio.run(coro)
    raise AssertionError("unreachable")


async def _signed_in(app: AppContext) -> Session:
    return await app.session_manager().ensure(prompt_credential, prompt_code)


def _open_dashboard(ctx: click.Context, param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    click.launch(DASHBOARD_URL)
    ctx.exit()


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--json", "as_json", is_flag=True, help="Display output as JSON.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default: ~/.config/rendish/config.yaml).",
)
@click.option("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR.")
@click.option(
    "--dash",
    "--dashboard",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_open_dashboard,
    help="Open the render dashboard in your browser.",
)
@click.version_option(__version__, prog_name="rendish")
@click.pass_context
def cli(ctx: click.Context, as_json: bool, config_path: Path | None, log_level: str | None) -> None:
    """An unofficial render.com CLI."""
    new_logger()
    overrides: dict[str, Any] = {}
    if log_level is not None:
        overrides["observability"] = {"log": {"level": log_level}}
    with error_boundary():
        directory = config_dir()
        config = load(config_path, overrides)
    new_logger(config.observability.log.level, config.observability.log.format)
    ctx.obj = AppContext(config=config, config_dir=directory, as_json=as_json)


# --- auth -------------------------------------------------------------------


@cli.group()
def auth() -> None:
    """Sign in to render and manage the saved session."""


@auth.command()
@click.pass_obj
def login(app: AppContext) -> None:
    """Sign in with password and TOTP code, replacing any saved session."""

    async def body() -> Session:
        return await app.session_manager().authenticate(prompt_credential(), prompt_code)

    session = run(body())
    click.echo(f"Signed in as {session.user.email} until {session.expires_at}")


@auth.command()
@click.pass_obj
def show(app: AppContext) -> None:
    """Show the saved session."""

    with error_boundary():
        session = app.session_manager().load()
    if session is None:
        print_error("No valid session saved; run `rendish auth login`")
        click.get_current_context().exit(exit_codes.GENERAL_ERROR)
    if app.as_json:
        print_json(session.model_dump(mode="json", by_alias=True))
        return
    display(
        ["email", "user id", "expires at"],
        [[session.user.email, session.user.id, session.expires_at]],
        as_json=False,
    )


@auth.command()
@click.pass_obj
def logout(app: AppContext) -> None:
    """Delete the saved session."""

    with error_boundary():
        app.session_manager().store.clear()
    click.echo("Signed out")


async def _resolve_service(app: AppContext, service: str) -> tuple[Session, RenderApiClient, Service, str]:
    """Sign in and find ``service`` by id or name in the default team.

    Also returns the id of the account owning the service.
    """
    session = await _signed_in(app)
    api = app.api(session)
    team = await api.default_team(session.user)
    found = await api.find_service(team.id, service)
    if found is None:
        raise ApiError(ApiErrorCodes.NOT_FOUND, f"Unable to find service from id or name {service}")
    return session, api, found, found.owner.id if found.owner else team.id


# --- logs -------------------------------------------------------------------


@cli.group()
def logs() -> None:
    """Tail logs from a service."""


@logs.command()
@click.argument("service")
@click.option("--minutes", type=click.IntRange(min=0), default=None, help="History to replay first.")
@click.option("--region", default=None, help="Region the service runs in.")
@click.option("--page-size", type=click.IntRange(min=1), default=None)
@click.pass_obj
def tail(
    app: AppContext,
    service: str,
    minutes: int | None,
    region: str | None,
    page_size: int | None,
) -> None:
    """Tail logs for the service given by id (srv-...) or name."""
    settings = app.config.logs

    async def body() -> int:
        session, _, found, owner_id = await _resolve_service(app, service)
        query = LogQuery.since(
            found.id,
            owner_id,
            minutes=settings.history_minutes if minutes is None else minutes,
            region=region or settings.region,
            page_size=page_size or settings.page_size,
            direction=settings.direction,
        )
        client = LogStreamClient(make_transport(app.config), settings.handshake_timeout_seconds)
        return await client.tail(session.id_token, query, lambda frame: click.echo(frame.format()))

    count = run(body())
    logger.info("logs.tail_finished", frames=count)


# --- services ---------------------------------------------------------------


@cli.group()
def services() -> None:
    """Render services."""


@services.command("list")
@click.pass_obj
def list_services(app: AppContext) -> None:
    """List all services."""

    async def body() -> list[list[Any]]:
        session = await _signed_in(app)
        api = app.api(session)
        team = await api.default_team(session.user)
        return [
            [s.name, s.id, s.state, s.user_facing_type_slug, s.env.name if s.env else None, s.slug]
            for s in await api.fetch_services(team.id)
        ]

    display(["name", "id", "state", "type", "runtime", "slug"], run(body()), app.as_json)


@services.command("metrics")
@click.argument("service")
@click.option(
    "--minutes",
    type=click.IntRange(min=1),
    default=DEFAULT_METRICS_HISTORY_MINUTES,
    show_default=True,
    help="History window.",
)
@click.option(
    "--step",
    type=click.IntRange(min=1),
    default=DEFAULT_METRICS_STEP_SECONDS,
    show_default=True,
    help="Seconds between samples.",
)
@click.pass_obj
def service_metrics(app: AppContext, service: str, minutes: int, step: int) -> None:
    """Memory and CPU samples for a service (id or name)."""

    async def body() -> list[list[Any]]:
        _, api, found, _ = await _resolve_service(app, service)
        return [[s.time, s.memory, s.cpu] for s in await api.fetch_service_metrics(found.id, minutes, step)]

    display(["time", "memory", "cpu"], run(body()), app.as_json)


@services.command("bandwidth")
@click.argument("service")
@click.pass_obj
def service_bandwidth(app: AppContext, service: str) -> None:
    """Bandwidth use in MB for a service (id or name)."""

    async def body() -> list[list[Any]]:
        _, api, found, _ = await _resolve_service(app, service)
        bandwidth = await api.fetch_service_bandwidth(found.id)
        return [[p.time, p.bandwidth_mb] for p in bandwidth.points]

    display(["time", "bandwidth"], run(body()), app.as_json)


@services.command("ssh", context_settings={"ignore_unknown_options": True})
@click.argument("service")
@click.argument("ssh_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def service_ssh(ctx: click.Context, service: str, ssh_args: tuple[str, ...]) -> None:
    """Connect to a service over ssh; extra arguments go to ssh.

    Assumes your ssh key is registered: https://docs.render.com/ssh-keys
    """
    app: AppContext = ctx.obj

    async def body() -> str:
        _, _, found, _ = await _resolve_service(app, service)
        if not found.ssh_address:
            raise ApiError(ApiErrorCodes.NO_SSH_ADDRESS, f"Service {found.name} has no ssh address")
        return found.ssh_address

    address = run(body())
    click.echo(f"connecting: ssh {address}", err=True)
    try:
        completed = subprocess.run(["ssh", address, *ssh_args])
    except FileNotFoundError:
        print_error("ssh executable not found on PATH")
        ctx.exit(exit_codes.GENERAL_ERROR)
    else:
        ctx.exit(completed.returncode)


# --- projects ---------------------------------------------------------------


@cli.group()
def projects() -> None:
    """Render projects."""


@projects.command("list")
@click.pass_obj
def list_projects(app: AppContext) -> None:
    """List all projects."""

    async def body() -> list[list[Any]]:
        session = await _signed_in(app)
        api = app.api(session)
        team = await api.default_team(session.user)
        return [
            [p.name, p.id, len(p.environments), p.service_count]
            for p in await api.fetch_projects(team.id)
        ]

    display(["name", "id", "environments", "services"], run(body()), app.as_json)


@projects.command("list-envs")
@click.argument("project")
@click.pass_obj
def list_project_envs(app: AppContext, project: str) -> None:
    """List the environments of a project (id or name)."""

    async def body() -> list[list[Any]]:
        session = await _signed_in(app)
        api = app.api(session)
        team = await api.default_team(session.user)
        found = await api.find_project(team.id, project)
        if found is None:
            raise ApiError(ApiErrorCodes.NOT_FOUND, f"Unable to find project from id or name {project}")
        resources = await api.fetch_project_resources(found.id)
        return [
            [e.name, e.id, len(e.services), len(e.databases), len(e.redises), len(e.env_groups)]
            for e in resources.environments
        ]

    display(["name", "id", "services", "databases", "redises", "env groups"], run(body()), app.as_json)


# --- env groups -------------------------------------------------------------


@cli.group("env-groups")
def env_groups() -> None:
    """Render environment groups."""


@env_groups.command("list")
@click.pass_obj
def list_env_groups(app: AppContext) -> None:
    """List all environment groups."""

    async def body() -> list[list[Any]]:
        session = await _signed_in(app)
        api = app.api(session)
        team = await api.default_team(session.user)
        return [
            [g.name, g.id, len(g.env_vars), g.updated_at]
            for g in await api.fetch_env_groups(team.id)
        ]

    display(["name", "id", "vars", "updated"], run(body()), app.as_json)


async def _resolve_env_group(app: AppContext, group: str) -> tuple[RenderApiClient, str]:
    session = await _signed_in(app)
    api = app.api(session)
    team = await api.default_team(session.user)
    found = await api.find_env_group(team.id, group)
    if found is None:
        raise ApiError(ApiErrorCodes.NOT_FOUND, f"Unable to find env group from id or name {group}")
    return api, found.id


@env_groups.command("vars")
@click.argument("group")
@click.pass_obj
def env_group_vars(app: AppContext, group: str) -> None:
    """List the variables of an environment group (id or name)."""

    async def body() -> list[list[Any]]:
        api, env_group_id = await _resolve_env_group(app, group)
        env_group = await api.fetch_env_group(env_group_id)
        return [[v.key, v.value] for v in env_group.env_vars]

    display(["key", "value"], run(body()), app.as_json)


@env_groups.command("services")
@click.argument("group")
@click.pass_obj
def env_group_services(app: AppContext, group: str) -> None:
    """List the services attached to an environment group (id or name)."""

    async def body() -> list[list[Any]]:
        api, env_group_id = await _resolve_env_group(app, group)
        return [
            [s.name, s.id, s.user_facing_type_slug]
            for s in await api.fetch_env_group_services(env_group_id)
        ]

    display(["name", "id", "type"], run(body()), app.as_json)


def main() -> None:
    """Console-script entry point."""
    cli(prog_name="rendish")
