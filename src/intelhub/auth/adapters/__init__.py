"""Authentication providers and credential adapters."""

from .base import AuthenticationError, FormProvider, LoginToken, Principal, ProviderType
from .jwt import JWTSessionAdapter

__all__ = [
    "AuthenticationError",
    "FormProvider",
    "JWTSessionAdapter",
    "LoginToken",
    "Principal",
    "ProviderType",
]
