"""Tests for request authentication (API tokens and session cookies)."""

import uuid
from unittest.mock import MagicMock

import pytest
from fastapi import HTTPException

from intelhub.auth.adapters.base import AuthenticationError, LoginToken
from intelhub.auth.context import ANONYMOUS
from intelhub.auth.middleware import (
    get_auth_context,
    get_auth_context_optional,
    resolve_auth_context,
)
from intelhub.auth.session import get_session_adapter
from intelhub.config import settings
from intelhub.database.connection import get_async_session
from intelhub.domain.users import user_renew_token


def make_request(authorization=None, cookie=None):
    request = MagicMock()
    request.headers = {"authorization": authorization} if authorization else {}
    request.cookies = {settings.session_cookie_name: cookie} if cookie else {}
    return request


def session_cookie_for(user) -> str:
    return get_session_adapter().issue_token(
        LoginToken(user_id=user.id, uuid=user.api_token, provider="local")
    )


class TestResolveAuthContext:
    @pytest.mark.asyncio
    async def test_no_credentials_is_anonymous(self):
        assert await resolve_auth_context(None, None) is ANONYMOUS

    @pytest.mark.asyncio
    async def test_bearer_api_token(self, admin_user):
        context = await resolve_auth_context(f"Bearer {admin_user.api_token}", None)

        assert context.is_authenticated
        assert context.user_id == admin_user.id
        assert context.provider == "api_token"
        assert context.user_name == "admin@intelhub.io"
        assert "BYPASS" in context.capabilities
        assert context.has_capability("SETTINGS_SETACCESSES")

    @pytest.mark.asyncio
    async def test_default_role_capabilities(self, analyst_user):
        context = await resolve_auth_context(f"Bearer {analyst_user.api_token}", None)

        assert context.capabilities == frozenset({"KNOWLEDGE", "EXPLORE"})
        assert not context.has_capability("SETTINGS_SETACCESSES")

    @pytest.mark.asyncio
    async def test_unknown_api_token(self, seeded_platform):
        with pytest.raises(AuthenticationError, match="Invalid API token"):
            await resolve_auth_context(f"Bearer {uuid.uuid4()}", None)

    @pytest.mark.asyncio
    async def test_malformed_authorization_header(self):
        with pytest.raises(AuthenticationError, match="Invalid authorization format"):
            await resolve_auth_context("Token abc", None)

    @pytest.mark.asyncio
    async def test_session_cookie(self, analyst_user):
        context = await resolve_auth_context(None, session_cookie_for(analyst_user))

        assert context.user_id == analyst_user.id
        assert context.provider == "session"
        assert context.principal["email"] == "analyst@intelhub.io"

    @pytest.mark.asyncio
    async def test_renewed_token_revokes_session(self, analyst_user):
        """Sessions are bound to the API token they were issued with."""
        cookie = session_cookie_for(analyst_user)
        async with get_async_session() as db:
            await user_renew_token(db, analyst_user.id)

        with pytest.raises(AuthenticationError, match="Session revoked"):
            await resolve_auth_context(None, cookie)


class TestAuthDependencies:
    @pytest.mark.asyncio
    async def test_required_auth_rejects_anonymous(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_auth_context(make_request())

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_required_auth_rejects_invalid_token(self, seeded_platform):
        with pytest.raises(HTTPException) as exc_info:
            await get_auth_context(make_request(authorization=f"Bearer {uuid.uuid4()}"))

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Invalid API token"

    @pytest.mark.asyncio
    async def test_optional_auth_ignores_invalid_cookie(self):
        context = await get_auth_context_optional(make_request(cookie="not-a-jwt"))

        assert context is ANONYMOUS

    @pytest.mark.asyncio
    async def test_optional_auth_with_token(self, analyst_user):
        request = make_request(authorization=f"Bearer {analyst_user.api_token}")
        context = await get_auth_context_optional(request)

        assert context.user_id == analyst_user.id
