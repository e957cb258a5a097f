"""Authentication middleware for FastAPI."""

from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException, Request

from ..config import settings
from ..database.connection import get_async_session
from ..domain.users import find_user_by_id, find_user_by_token, get_capabilities
from ..dbmodels import Users
from ..logging import get_logger, user_id_ctx
from .adapters.base import AuthenticationError, Principal
from .context import ANONYMOUS, AuthContext
from .session import get_session_adapter

logger = get_logger(__name__)


def _parse_uuid(value: str) -> UUID | None:
    try:
        return UUID(value)
    except ValueError:
        return None


async def _user_from_api_token(token: str) -> tuple[Users, Principal]:
    api_token = _parse_uuid(token)
    if api_token is None:
        raise AuthenticationError("Invalid API token")

    async with get_async_session() as db:
        user = await find_user_by_token(db, api_token)
    if user is None:
        raise AuthenticationError("Invalid API token")
    return user, Principal(provider="api_token", subject=str(user.id), email=user.email)


async def _user_from_session(token: str) -> tuple[Users, Principal]:
    principal = get_session_adapter().verify_token(token)
    user_id = _parse_uuid(principal["subject"])
    if user_id is None:
        raise AuthenticationError("Invalid session subject")

    async with get_async_session() as db:
        user = await find_user_by_id(db, user_id)

    # The session is bound to the API token it was issued with
    if user is None or str(user.api_token) != principal.get("claims", {}).get("jti"):
        raise AuthenticationError("Session revoked")
    principal["email"] = user.email
    return user, principal


async def resolve_auth_context(
    authorization: str | None, session_cookie: str | None
) -> AuthContext:
    """
    Build the authentication context from request credentials.

    `Authorization: Bearer <api token>` takes precedence over the session
    cookie. No credential yields an anonymous context.

    Raises:
        AuthenticationError: If a credential is present but invalid
    """
    if authorization:
        if not authorization.startswith("Bearer "):
            raise AuthenticationError("Invalid authorization format. Expected: Bearer <token>")
        token = authorization[7:].strip()
        if not token:
            raise AuthenticationError("Empty token")
        user, principal = await _user_from_api_token(token)
    elif session_cookie:
        token = session_cookie
        user, principal = await _user_from_session(token)
    else:
        return ANONYMOUS

    async with get_async_session() as db:
        capabilities = await get_capabilities(db, user.id)

    user_id_ctx.set(str(user.id))
    logger.debug("Request authenticated", provider=principal["provider"], user_id=str(user.id))

    return AuthContext(
        user_id=user.id,
        principal=principal,
        token=token,
        user_name=user.email,
        capabilities=frozenset(capability.name for capability in capabilities),
    )


async def get_auth_context(request: Request) -> AuthContext:
    """
    FastAPI dependency: authenticate the request or fail with 401.

    Returns:
        AuthContext for the authenticated user
    """
    try:
        auth_context = await resolve_auth_context(
            request.headers.get("authorization"),
            request.cookies.get(settings.session_cookie_name),
        )
    except AuthenticationError as e:
        logger.warning("Authentication failed", error=str(e))
        raise HTTPException(
            status_code=401,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    if not auth_context.is_authenticated:
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth_context


async def get_auth_context_optional(request: Request) -> AuthContext:
    """
    Optional authentication - returns an anonymous context if credentials
    are missing or invalid.
    """
    try:
        return await resolve_auth_context(
            request.headers.get("authorization"),
            request.cookies.get(settings.session_cookie_name),
        )
    except AuthenticationError as e:
        logger.info("Ignoring invalid credentials", error=str(e))
        return ANONYMOUS
