"""Parsing of the ``filters`` query parameter.

The parameter is a JSON object mapping a field name to its accepted values,
either as a list (``{"name": ["a", "b"]}``) or as a map of value to a
boolean (``{"name": {"a": true}}``). Values for a field form an ordered set:
duplicates are dropped and first-seen order is kept.
"""

from __future__ import annotations

import json
from typing import Any

from netapi.errors import InvalidFilterSyntax

# Fields the network list endpoint acts on; others are accepted and ignored.
KNOWN_FIELDS = frozenset({"name", "id"})


def _field_values(raw: str, field: str, values: Any) -> list[str]:
    if isinstance(values, dict):
        candidates = [value for value, enabled in values.items() if enabled]
    elif isinstance(values, list):
        candidates = values
    else:
        raise InvalidFilterSyntax(raw, f"values for '{field}' must be a list or an object")

    seen: dict[str, None] = {}
    for value in candidates:
        if not isinstance(value, str):
            raise InvalidFilterSyntax(raw, f"values for '{field}' must be strings")
        seen.setdefault(value, None)
    return list(seen)


def parse_filters(raw: str | None) -> dict[str, list[str]]:
    """Parse a raw filter specification.

    An empty or missing specification means "no filters".

    Raises:
        InvalidFilterSyntax: not a JSON object of field -> values
    """
    if raw is None or not raw.strip():
        return {}

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidFilterSyntax(raw, f"not valid JSON ({e.msg})") from e

    if not isinstance(data, dict):
        raise InvalidFilterSyntax(raw, "expected a JSON object")

    return {field: _field_values(raw, field, values) for field, values in data.items()}
