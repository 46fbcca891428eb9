"""GraphQL client configuration."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_GRAPHQL_URL = "https://api.render.com/graphql"


@dataclass
class GraphQlConfig:
    """HTTP GraphQL client configuration.

    ``timeout_seconds`` of ``None`` disables the deadline entirely.
    """

    url: str = DEFAULT_GRAPHQL_URL
    timeout_seconds: float | None = None
    origin: str | None = None
