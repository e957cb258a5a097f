"""JWT session adapter for self-issued session cookies."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
from jwt.exceptions import InvalidTokenError

from ...logging import get_logger
from .base import AuthenticationError, LoginToken, Principal

logger = get_logger(__name__)


class JWTSessionAdapter:
    """Issues and verifies signed session tokens.

    The `jti` claim carries the user's API token at issuance time; callers
    compare it with the stored token so that renewing the API token revokes
    every outstanding session.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        issuer: str = "intelhub",
        audience: str = "intelhub-api",
        token_expiry_hours: int = 24,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.audience = audience
        self.token_expiry_hours = token_expiry_hours

    @property
    def max_age(self) -> int:
        return self.token_expiry_hours * 3600

    def _decode(self, token: str) -> dict:
        return jwt.decode(
            token,
            self.secret_key,
            algorithms=[self.algorithm],
            issuer=self.issuer,
            audience=self.audience,
            options={
                "verify_exp": True,
                "verify_nbf": True,
                "verify_iat": True,
                "require": ["sub", "jti", "exp"],
            },
        )

    def issue_token(self, login_token: LoginToken) -> str:
        """Issue a session token for a successful login."""
        now = datetime.now(UTC)
        payload = {
            "iss": self.issuer,
            "aud": self.audience,
            "iat": now,
            "nbf": now,
            "exp": now + timedelta(hours=self.token_expiry_hours),
            "sub": str(login_token.user_id),
            "jti": str(login_token.uuid),
            "provider": login_token.provider,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify_token(self, token: str) -> Principal:
        """Verify a session token and return the principal."""
        try:
            payload = self._decode(token)
        except InvalidTokenError as e:
            logger.warning("Session token validation failed", error=str(e))
            raise AuthenticationError("Invalid session") from e

        return Principal(provider="session", subject=payload["sub"], claims=payload)

    def peek_claims(self, token: str) -> dict | None:
        """Signature-checked claims without raising, for log enrichment."""
        try:
            return self._decode(token)
        except InvalidTokenError:
            return None
