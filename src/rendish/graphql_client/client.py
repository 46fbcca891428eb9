"""GraphQL client abstraction."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .exceptions import RequestError, RequestErrorCodes
from .types import GraphQlQuery


class GraphQlClient(ABC):
    """Abstract GraphQL request executor.

    One call is one request/response exchange. Implementations hold no
    per-call state and never retry.
    """

    @abstractmethod
    async def execute(self, query: GraphQlQuery, token: str | None = None) -> dict[str, Any]:
        """Run ``query`` and return the response ``data`` mapping."""
        ...


class InMemoryGraphQlClient(GraphQlClient):
    """In-memory GraphQL client for testing."""

    def __init__(self) -> None:
        self._responses: dict[str, dict[str, Any] | RequestError] = {}
        self.calls: list[tuple[GraphQlQuery, str | None]] = []

    def set_response(self, operation_name: str, data: dict[str, Any]) -> None:
        self._responses[operation_name] = data

    def set_error(self, operation_name: str, error: RequestError) -> None:
        self._responses[operation_name] = error

    async def execute(self, query: GraphQlQuery, token: str | None = None) -> dict[str, Any]:
        self.calls.append((query, token))
        if query.operation_name not in self._responses:
            raise RequestError(
                RequestErrorCodes.UNKNOWN_OPERATION,
                f"Operation not found: {query.operation_name}",
            )
        response = self._responses[query.operation_name]
        if isinstance(response, RequestError):
            raise response
        return response
