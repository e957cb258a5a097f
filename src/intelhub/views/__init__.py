"""List-view parameter persistence."""

from .parameters import (
    URL_EXCLUDED_KEYS,
    build_view_params_from_url_and_storage,
    save_view_parameters,
    to_query_string,
)

__all__ = [
    "URL_EXCLUDED_KEYS",
    "build_view_params_from_url_and_storage",
    "save_view_parameters",
    "to_query_string",
]
