"""Authentication context for request handling."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from .adapters.base import Principal

BYPASS = "BYPASS"


@dataclass
class AuthContext:
    """Runtime authentication context for a request."""

    user_id: UUID | None
    principal: Principal | None
    token: str | None
    user_name: str | None = None
    capabilities: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_authenticated(self) -> bool:
        """Check if the request is authenticated."""
        return self.user_id is not None and self.principal is not None

    @property
    def provider(self) -> str | None:
        """Get the credential kind used for this request."""
        return self.principal["provider"] if self.principal else None

    def has_capability(self, name: str) -> bool:
        """BYPASS grants every capability."""
        return BYPASS in self.capabilities or name in self.capabilities


ANONYMOUS = AuthContext(user_id=None, principal=None, token=None)
