"""Session cookie handling."""

from __future__ import annotations

from fastapi import Response

from ..config import settings
from .adapters.base import LoginToken
from .adapters.jwt import JWTSessionAdapter


def get_session_adapter() -> JWTSessionAdapter:
    """Build the session adapter from current settings (no global caching)."""
    return JWTSessionAdapter(
        secret_key=settings.session_secret,
        algorithm=settings.session_algorithm,
        issuer=settings.session_issuer,
        audience=settings.session_audience,
        token_expiry_hours=settings.session_expiry_hours,
    )


def set_authentication_cookie(login_token: LoginToken, response: Response) -> str:
    """Issue a session for `login_token` and attach it to the response."""
    adapter = get_session_adapter()
    session_token = adapter.issue_token(login_token)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session_token,
        max_age=adapter.max_age,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return session_token


def clear_authentication_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
