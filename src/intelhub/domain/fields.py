"""Helpers for `fieldPatch` style edits (`{key, value: [String]}`)."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from ..errors import FunctionalError


def single_value(value: list[str] | None) -> str | None:
    """Single-valued attributes take the first element of the edit value."""
    if not value:
        return None
    return value[0]


def parse_bool(value: str | None) -> bool:
    return str(value).lower() == "true"


def apply_edit(
    entity: Any,
    editable: Mapping[str, Callable[[list[str] | None], Any]],
    key: str,
    value: list[str] | None,
) -> None:
    """Set `key` on `entity` using the parser registered for it."""
    parser = editable.get(key)
    if parser is None:
        raise FunctionalError(f"Field {key} cannot be edited", key=key)
    setattr(entity, key, parser(value))


def required(field: str) -> Callable[[list[str] | None], str]:
    """Parser for single-valued attributes that cannot be emptied."""

    def parse(value: list[str] | None) -> str:
        parsed = single_value(value)
        if not parsed:
            raise FunctionalError(f"Field {field} cannot be empty", key=field)
        return parsed

    return parse
