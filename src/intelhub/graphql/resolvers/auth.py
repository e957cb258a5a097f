from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

from ...auth.factory import get_form_providers
from ...auth.session import clear_authentication_cookie, set_authentication_cookie
from ...errors import AuthenticationFailure
from ...logging import get_logger
from ..access_control import require_authenticated

if TYPE_CHECKING:
    from ..types.user import UserLoginInput

logger = get_logger(__name__)


async def login(info: strawberry.Info, input: UserLoginInput) -> str:
    """
    Try each form provider in configuration order.

    The first provider returning a login token wins: the session cookie is
    set on the response and the user's API token is returned. A provider
    that fails is logged and skipped.

    Raises:
        AuthenticationFailure: If no provider validates the credentials
    """
    providers = get_form_providers()
    if not providers:
        logger.error("[Configuration] Cant authenticate without any form providers")

    for provider in providers:
        try:
            token = await provider.authenticate(input.email, input.password)
        except Exception as e:
            logger.error(
                f"[Configuration] Cant authenticate with {provider.name}",
                provider=provider.name,
                error=str(e),
            )
            token = None

        if token is not None:
            set_authentication_cookie(token, info.context["response"])
            logger.info("User logged in", user_id=str(token.user_id), provider=token.provider)
            return str(token.uuid)

    raise AuthenticationFailure()


async def logout(info: strawberry.Info) -> UUID:
    auth_context = require_authenticated(info)
    clear_authentication_cookie(info.context["response"])
    logger.info("User logged out", user_id=str(auth_context.user_id))
    return auth_context.user_id
