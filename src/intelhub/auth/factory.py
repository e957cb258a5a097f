"""Factory for creating authentication providers based on configuration."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..config import settings
from ..logging import get_logger
from .adapters.base import FormProvider, ProviderType
from .adapters.local import LocalFormProvider

logger = get_logger(__name__)


def build_provider(name: str, definition: Mapping[str, Any]) -> FormProvider:
    """Create one provider from its `{"strategy": ..., "config": {...}}` definition."""
    strategy = definition.get("strategy")

    if strategy == "LocalStrategy":
        return LocalFormProvider(name=name)

    raise ValueError(f"Unsupported authentication strategy: {strategy} (provider {name})")


def get_auth_providers(
    definitions: Mapping[str, Mapping[str, Any]] | None = None,
) -> list[FormProvider]:
    """Create the configured providers, preserving declaration order."""
    if definitions is None:
        definitions = settings.auth_providers
    return [build_provider(name, definition) for name, definition in definitions.items()]


def get_form_providers(providers: list[FormProvider] | None = None) -> list[FormProvider]:
    """Providers able to validate an email/password pair."""
    if providers is None:
        providers = get_auth_providers()
    return [provider for provider in providers if provider.type == ProviderType.FORM]
