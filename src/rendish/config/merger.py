"""Deep merge of configuration mappings."""

from __future__ import annotations

from typing import Any


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return a new mapping with ``override`` merged over ``base``.

    Nested mappings merge recursively, lists are replaced, and ``None`` at any
    depth of ``override`` leaves the base value alone (an unset command-line
    flag), including when ``base`` has no such key.
    """
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if value is None:
            continue
        if isinstance(value, dict):
            current = result.get(key)
            result[key] = deep_merge(current if isinstance(current, dict) else {}, value)
        else:
            result[key] = value
    return result
