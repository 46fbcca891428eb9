"""Validation of per-operation response fields."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from .exceptions import ProtocolError

T = TypeVar("T")


def decode_field(data: dict[str, Any], field: str, shape: type[T] | Any) -> T:
    """Validate ``data[field]`` against ``shape``.

    ``shape`` is anything pydantic accepts, e.g. a model or ``list[Model]``.

    Raises:
        ProtocolError: the field is missing, null, or does not match ``shape``
    """
    if data.get(field) is None:
        raise ProtocolError(f"Response is missing field {field!r}")
    try:
        return TypeAdapter(shape).validate_python(data[field])
    except ValidationError as e:
        raise ProtocolError(
            f"Response field {field!r} has an unexpected shape: {e}",
            errors=e.json(),
            cause=e,
        ) from e
