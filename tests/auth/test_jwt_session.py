"""Tests for the JWT session adapter."""

import uuid
from datetime import UTC, datetime, timedelta

import jwt
import pytest

from intelhub.auth.adapters.base import AuthenticationError, LoginToken
from intelhub.auth.adapters.jwt import JWTSessionAdapter


@pytest.fixture
def adapter():
    return JWTSessionAdapter(secret_key="test-secret", token_expiry_hours=2)


@pytest.fixture
def login_token():
    return LoginToken(user_id=uuid.uuid4(), uuid=uuid.uuid4(), provider="local")


class TestJWTSessionAdapter:
    def test_issue_and_verify(self, adapter, login_token):
        """A freshly issued session verifies and carries the user and API token."""
        token = adapter.issue_token(login_token)
        principal = adapter.verify_token(token)

        assert principal["provider"] == "session"
        assert principal["subject"] == str(login_token.user_id)
        assert principal["claims"]["jti"] == str(login_token.uuid)
        assert principal["claims"]["provider"] == "local"

    def test_max_age_matches_expiry(self, adapter):
        assert adapter.max_age == 2 * 3600

    def test_wrong_secret_rejected(self, adapter, login_token):
        token = JWTSessionAdapter(secret_key="other-secret").issue_token(login_token)

        with pytest.raises(AuthenticationError, match="Invalid session"):
            adapter.verify_token(token)

    def test_expired_token_rejected(self, adapter, login_token):
        past = datetime.now(UTC) - timedelta(hours=3)
        token = jwt.encode(
            {
                "iss": "intelhub",
                "aud": "intelhub-api",
                "iat": past,
                "exp": past + timedelta(hours=1),
                "sub": str(login_token.user_id),
                "jti": str(login_token.uuid),
            },
            "test-secret",
            algorithm="HS256",
        )

        with pytest.raises(AuthenticationError):
            adapter.verify_token(token)

    def test_token_without_jti_rejected(self, adapter, login_token):
        """Sessions must be bound to an API token."""
        now = datetime.now(UTC)
        token = jwt.encode(
            {
                "iss": "intelhub",
                "aud": "intelhub-api",
                "iat": now,
                "exp": now + timedelta(hours=1),
                "sub": str(login_token.user_id),
            },
            "test-secret",
            algorithm="HS256",
        )

        with pytest.raises(AuthenticationError):
            adapter.verify_token(token)

    def test_wrong_audience_rejected(self, login_token):
        token = JWTSessionAdapter(secret_key="test-secret", audience="other").issue_token(
            login_token
        )

        with pytest.raises(AuthenticationError):
            JWTSessionAdapter(secret_key="test-secret").verify_token(token)

    def test_peek_claims(self, adapter, login_token):
        """peek_claims returns None instead of raising."""
        token = adapter.issue_token(login_token)

        assert adapter.peek_claims(token)["sub"] == str(login_token.user_id)
        assert adapter.peek_claims("garbage") is None
