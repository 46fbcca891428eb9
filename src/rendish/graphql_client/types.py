"""GraphQL envelope types."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from .exceptions import ProtocolError


@dataclass(frozen=True)
class GraphQlQuery:
    """Request envelope: one named operation with its variables."""

    operation_name: str
    query: str
    variables: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "operationName": self.operation_name,
            "variables": self.variables,
            "query": self.query,
        }


@dataclass
class ErrorLocation:
    """Error location in a GraphQL document."""

    line: int
    column: int


@dataclass
class GraphQlError:
    """GraphQL error."""

    message: str
    locations: list[ErrorLocation] | None = None
    path: list[Any] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> GraphQlError:
        if not isinstance(data, dict):
            return cls(message=str(data))
        locations = data.get("locations")
        path = data.get("path")
        return cls(
            message=str(data.get("message", "")),
            # malformed entries are skipped; the raw record is still reported
            locations=(
                [
                    ErrorLocation(line=loc.get("line", 0), column=loc.get("column", 0))
                    for loc in locations
                    if isinstance(loc, dict)
                ]
                if isinstance(locations, list)
                else None
            ),
            path=path if isinstance(path, list) else None,
        )


@dataclass
class GraphQlResponse:
    """Response envelope.

    ``raw_errors`` keeps the error records exactly as the server sent them so
    they can be reported verbatim.
    """

    data: dict[str, Any] | None = None
    errors: list[GraphQlError] | None = None
    raw_errors: list[Any] | None = None

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def serialized_errors(self) -> str:
        return json.dumps(self.raw_errors or [])

    @classmethod
    def from_payload(cls, payload: Any) -> GraphQlResponse:
        """Build a response from a decoded JSON body.

        Raises:
            ProtocolError: the body is not a ``{data?, errors?}`` object
        """
        if not isinstance(payload, dict):
            raise ProtocolError(
                f"Response envelope is absent or not an object: {payload!r}",
                errors=json.dumps(payload),
            )
        data = payload.get("data")
        errors = payload.get("errors")
        if data is not None and not isinstance(data, dict):
            raise ProtocolError(f"Response data is not an object: {data!r}")
        if errors is not None and not isinstance(errors, list):
            raise ProtocolError(
                f"Response errors is not a list: {errors!r}",
                errors=json.dumps(errors),
            )
        return cls(
            data=data,
            errors=[GraphQlError.from_dict(e) for e in errors] if errors is not None else None,
            raw_errors=errors,
        )
