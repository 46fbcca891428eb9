"""httpx-backed GraphQL request executor."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from .client import GraphQlClient
from .config import GraphQlConfig
from .exceptions import ProtocolError, RequestTimeoutError, TransportError
from .types import GraphQlQuery, GraphQlResponse

logger = structlog.stdlib.get_logger(__name__)


class HttpGraphQlClient(GraphQlClient):
    """Single-shot GraphQL executor over HTTPS POST."""

    def __init__(self, config: GraphQlConfig | None = None) -> None:
        self._config = config or GraphQlConfig()

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._config.timeout_seconds)

    def _headers(self, token: str | None) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._config.origin:
            headers["Origin"] = self._config.origin
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def execute(self, query: GraphQlQuery, token: str | None = None) -> dict[str, Any]:
        """Run one operation and return its ``data`` mapping.

        Raises:
            TransportError: non-2xx status or the request never got a response
            ProtocolError: the body is not a valid envelope, or carries errors
            RequestTimeoutError: the configured deadline elapsed
        """
        log = logger.bind(operation=query.operation_name, authenticated=token is not None)
        log.debug("graphql.request")
        try:
            async with self._make_client() as client:
                resp = await client.post(
                    self._config.url,
                    json=query.to_dict(),
                    headers=self._headers(token),
                )
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(
                f"{query.operation_name}: no response within {self._config.timeout_seconds}s",
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"{query.operation_name}: request failed: {e}",
                request=query,
                body=str(e),
                cause=e,
            ) from e

        if not resp.is_success:
            log.debug("graphql.transport_error", status=resp.status_code)
            raise TransportError(
                f"error with request {query.operation_name}: HTTP {resp.status_code}:\n{resp.text}",
                request=query,
                body=resp.text,
                status_code=resp.status_code,
            )

        try:
            payload = resp.json()
        except ValueError as e:
            raise ProtocolError(
                f"{query.operation_name}: response body is not JSON",
                cause=e,
            ) from e

        response = GraphQlResponse.from_payload(payload)
        if response.has_errors:
            errors = response.serialized_errors()
            log.debug("graphql.protocol_error", errors=len(response.errors or []))
            raise ProtocolError(f"Request failure: {errors}", errors=errors)

        log.debug("graphql.response")
        return response.data or {}
