"""Authentication dependencies for API endpoints."""

from __future__ import annotations

from uuid import UUID

from fastapi import Depends, HTTPException
from pydantic import BaseModel

from ..auth.context import AuthContext
from ..auth.middleware import get_auth_context
from ..logging import get_logger

logger = get_logger(__name__)


class AuthenticatedUser(BaseModel):
    """Represents an authenticated user."""

    user_id: UUID
    email: str | None = None
    capabilities: list[str] = []


async def get_current_user(
    auth_context: AuthContext = Depends(get_auth_context),
) -> AuthenticatedUser:
    """
    Get the current authenticated user from the auth context.

    Raises:
        HTTPException: If user is not authenticated
    """
    if not auth_context.is_authenticated or auth_context.user_id is None:
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return AuthenticatedUser(
        user_id=auth_context.user_id,
        email=auth_context.principal.get("email") if auth_context.principal else None,
        capabilities=sorted(auth_context.capabilities),
    )
