"""Base authentication provider interface and types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, NotRequired, Protocol, TypedDict
from uuid import UUID


class ProviderType(Enum):
    """How a provider collects credentials."""

    FORM = "FORM"  # email/password submitted through the login mutation
    SSO = "SSO"  # redirect based flows


class Principal(TypedDict):
    """Identity extracted from an incoming credential."""

    provider: Literal["api_token", "session"]
    subject: str  # local user id
    email: NotRequired[str]
    claims: NotRequired[dict]


@dataclass(frozen=True)
class LoginToken:
    """Result of a successful form login.

    `uuid` is the user's API token; it is what the login mutation returns and
    what the session cookie is bound to.
    """

    user_id: UUID
    uuid: UUID
    provider: str


class FormProvider(Protocol):
    """A provider validating an email/password pair."""

    name: str
    type: ProviderType

    async def authenticate(self, email: str, password: str) -> LoginToken | None:
        """
        Validate credentials.

        Returns:
            A LoginToken when the credentials are valid, None otherwise
        """
        ...


class AuthenticationError(Exception):
    """Raised when a presented credential cannot be verified."""

    pass
