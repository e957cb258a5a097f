"""Authentication and authorization system for IntelHub."""

from .adapters.base import AuthenticationError, FormProvider, LoginToken, Principal
from .context import AuthContext

__all__ = [
    "AuthContext",
    "AuthenticationError",
    "FormProvider",
    "LoginToken",
    "Principal",
]
