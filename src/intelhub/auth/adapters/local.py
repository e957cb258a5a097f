"""Local form provider: credentials checked against the users table."""

from __future__ import annotations

from ...database.connection import get_async_session
from ...domain.users import find_user_by_email
from ...logging import get_logger
from ..passwords import verify_password
from .base import LoginToken, ProviderType

logger = get_logger(__name__)


class LocalFormProvider:
    """Email/password authentication with bcrypt hashes stored locally."""

    type = ProviderType.FORM

    def __init__(self, name: str = "local"):
        self.name = name

    async def authenticate(self, email: str, password: str) -> LoginToken | None:
        if not email or not password:
            return None

        async with get_async_session() as db:
            user = await find_user_by_email(db, email)

        # External persons have no credentials and can never log in
        if user is None or user.external:
            logger.info("Local login rejected, unknown user", provider=self.name)
            return None

        if not verify_password(password, user.password_hash):
            logger.info(
                "Local login rejected, wrong password", provider=self.name, user_id=str(user.id)
            )
            return None

        return LoginToken(user_id=user.id, uuid=user.api_token, provider=self.name)
