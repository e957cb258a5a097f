"""
Functional errors raised by the domain layer and surfaced through GraphQL.

Each error carries a stable ``code`` that the GraphQL layer copies into the
error ``extensions`` so clients can branch on it without parsing messages.
"""

from __future__ import annotations

from typing import Any


class IntelHubError(Exception):
    """Base class for errors that are safe to expose to API clients."""

    code = "INTERNAL_ERROR"
    default_message = "An error occurred"

    def __init__(self, message: str | None = None, **data: Any):
        super().__init__(message or self.default_message)
        self.data = data

    @property
    def extensions(self) -> dict[str, Any]:
        """Picked up by graphql-core when the error is located in a result."""
        return {"code": self.code, **self.data}


class AuthenticationFailure(IntelHubError):
    """Raised when no configured provider validates the credentials."""

    code = "AUTH_FAILURE"
    default_message = "Wrong name or password"


class AuthRequired(IntelHubError):
    code = "AUTH_REQUIRED"
    default_message = "You must be logged in to do this."


class ForbiddenAccess(IntelHubError):
    code = "FORBIDDEN_ACCESS"
    default_message = "You are not allowed to do this."


class MissingReferenceError(IntelHubError):
    code = "MISSING_REFERENCE"
    default_message = "Element not found"


class FunctionalError(IntelHubError):
    code = "FUNCTIONAL_ERROR"
    default_message = "Business validation"


class AlreadyExistsError(IntelHubError):
    code = "ALREADY_EXISTS"
    default_message = "Element already exists"
