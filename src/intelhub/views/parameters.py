"""
Synchronize list-view parameters between a URL query string and storage.

A list view (filters, sorting, pagination size...) is described by a flat
parameter bag. The query string is the shareable form; storage remembers the
last state per view so that reopening a view without a query string restores
it. Query values always win over stored ones.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import quote_plus, urlencode

# Parameters that only make sense locally and never go in the URL
URL_EXCLUDED_KEYS = frozenset(
    {
        "view",
        "types",
        "openExports",
        "numberOfElements",
        "lastSeenStart",
        "lastSeenStop",
        "inferred",
    }
)

# Parameters holding comma-separated lists when they come from a query string
LIST_KEYS = ("stixDomainEntitiesTypes", "indicatorTypes", "observableTypes")


class ViewParameterStorage(Protocol):
    """Key/value persistence for view parameter bags."""

    async def get(self, storage_key: str) -> dict[str, Any] | None: ...

    async def set(self, storage_key: str, params: dict[str, Any]) -> None: ...


@dataclass
class SavedViewParameters:
    params: dict[str, Any]
    search: str


def _stringify(value: Any) -> str:
    """Render a value the way browsers coerce `URLSearchParams` values."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, list | tuple):
        return ",".join(_stringify(item) for item in value)
    if isinstance(value, Mapping):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def url_parameters(params: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in params.items() if key not in URL_EXCLUDED_KEYS}


def _form_quote(
    string: str, safe: str = "", encoding: str | None = None, errors: str | None = None
) -> str:
    # application/x-www-form-urlencoded keeps `*` and escapes `~`
    return quote_plus(string, safe="*", encoding=encoding, errors=errors).replace("~", "%7E")


def to_query_string(params: Mapping[str, Any]) -> str:
    """Serialize the URL-visible part of `params` (no leading `?`)."""
    pairs = [(key, _stringify(value)) for key, value in url_parameters(params).items()]
    return urlencode(pairs, quote_via=_form_quote)


def parse_query_params(
    query_params: Mapping[str, str] | Iterable[tuple[str, str]],
) -> dict[str, Any]:
    """Flatten query pairs into a dict; with repeated keys the last one wins."""
    pairs = query_params.items() if isinstance(query_params, Mapping) else query_params
    params: dict[str, Any] = {}
    for key, value in pairs:
        params[key] = value
    return params


def normalize_view_params(params: dict[str, Any]) -> dict[str, Any]:
    """Restore the typed values that do not survive a round-trip through a URL."""
    if params.get("orderAsc"):
        order_asc = params["orderAsc"]
        params["orderAsc"] = order_asc is True or str(order_asc) == "true"
    for key in LIST_KEYS:
        value = params.get(key)
        if value and isinstance(value, str):
            params[key] = value.split(",")
    return params


async def save_view_parameters(
    storage: ViewParameterStorage, storage_key: str, params: dict[str, Any]
) -> SavedViewParameters:
    """Persist `params` and return them along with their query string."""
    await storage.set(storage_key, params)
    return SavedViewParameters(params=params, search=to_query_string(params))


async def build_view_params_from_url_and_storage(
    storage: ViewParameterStorage,
    storage_key: str,
    query_params: Mapping[str, str] | Iterable[tuple[str, str]],
) -> SavedViewParameters:
    """Merge URL parameters over stored ones, normalize, save and return them."""
    final_params = parse_query_params(query_params)
    stored = await storage.get(storage_key)
    if stored:
        final_params = {**stored, **final_params}

    return await save_view_parameters(storage, storage_key, normalize_view_params(final_params))
