"""
Unit tests for GraphQL access control helpers
"""

import uuid
from unittest.mock import MagicMock

import pytest
import strawberry

from intelhub.auth.context import ANONYMOUS
from intelhub.errors import AuthRequired, ForbiddenAccess
from intelhub.graphql.access_control import (
    RequiredCapability,
    can_read_token,
    get_auth_context_from_info,
    require_authenticated,
    require_capability,
)
from intelhub.graphql.resolvers.user import resolve_user_token


class TestRequireCapability:
    def test_anonymous_is_rejected(self, info_factory):
        with pytest.raises(AuthRequired):
            require_capability(info_factory(), RequiredCapability.SETTINGS_SETACCESSES)

    def test_missing_capability(self, info_factory, auth_context_factory):
        info = info_factory(auth_context_factory(uuid.uuid4(), ["KNOWLEDGE"]))

        with pytest.raises(ForbiddenAccess) as exc_info:
            require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)

        assert exc_info.value.extensions == {
            "code": "FORBIDDEN_ACCESS",
            "capability": "SETTINGS_SETACCESSES",
        }

    def test_exact_capability(self, info_factory, auth_context_factory):
        context = auth_context_factory(uuid.uuid4(), ["SETTINGS_SETACCESSES"])

        info = info_factory(context)

        assert require_capability(info, RequiredCapability.SETTINGS_SETACCESSES) is context

    def test_parent_capability_is_not_expanded(self, info_factory, auth_context_factory):
        """Holding SETTINGS does not grant SETTINGS_SETACCESSES."""
        info = info_factory(auth_context_factory(uuid.uuid4(), ["SETTINGS"]))

        with pytest.raises(ForbiddenAccess):
            require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)

    def test_bypass_grants_everything(self, info_factory, auth_context_factory):
        info = info_factory(auth_context_factory(uuid.uuid4(), ["BYPASS"]))

        require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
        require_capability(info, RequiredCapability.SETTINGS)


class TestAuthContextLookup:
    def test_missing_auth_is_anonymous(self):
        info = MagicMock(spec=strawberry.Info)
        info.context = {}

        assert get_auth_context_from_info(info) is ANONYMOUS
        with pytest.raises(AuthRequired):
            require_authenticated(info)


class TestCanReadToken:
    def test_own_token(self, auth_context_factory):
        user_id = uuid.uuid4()

        assert can_read_token(auth_context_factory(user_id), user_id)

    def test_other_users_token(self, auth_context_factory):
        context = auth_context_factory(uuid.uuid4(), ["SETTINGS_SETACCESSES"])

        assert not can_read_token(context, uuid.uuid4())

    def test_bypass_reads_any_token(self, auth_context_factory):
        assert can_read_token(auth_context_factory(uuid.uuid4(), ["BYPASS"]), uuid.uuid4())

    def test_anonymous(self):
        assert not can_read_token(ANONYMOUS, uuid.uuid4())


class TestUserTokenField:
    @pytest.mark.asyncio
    async def test_anonymous_must_authenticate(self, info_factory):
        user = MagicMock(id=uuid.uuid4())

        with pytest.raises(AuthRequired) as exc_info:
            await resolve_user_token(user, info_factory())

        assert exc_info.value.extensions["code"] == "AUTH_REQUIRED"

    @pytest.mark.asyncio
    async def test_other_user_is_forbidden(self, info_factory, auth_context_factory):
        user = MagicMock(id=uuid.uuid4())
        info = info_factory(auth_context_factory(uuid.uuid4(), ["SETTINGS_SETACCESSES"]))

        with pytest.raises(ForbiddenAccess):
            await resolve_user_token(user, info)
