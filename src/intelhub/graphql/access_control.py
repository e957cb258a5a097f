"""
Shared access control logic for GraphQL resolvers
"""

from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

from ..auth.context import ANONYMOUS, BYPASS
from ..errors import AuthRequired, ForbiddenAccess
from ..logging import get_logger

if TYPE_CHECKING:
    from ..auth.context import AuthContext

logger = get_logger(__name__)


class RequiredCapability(str, Enum):
    """Capabilities checked by the API (names match the seeded capability tree)."""

    BYPASS = BYPASS
    SETTINGS = "SETTINGS"
    SETTINGS_SETACCESSES = "SETTINGS_SETACCESSES"


def get_auth_context_from_info(info: strawberry.Info) -> "AuthContext":
    """
    Extract auth context from GraphQL info object.

    The context getter authenticates the request once; a missing entry is
    treated as anonymous.
    """
    auth_context = info.context.get("auth")
    if auth_context is None:
        logger.error("Auth context not found in GraphQL context")
        return ANONYMOUS
    return auth_context


def require_authenticated(info: strawberry.Info) -> "AuthContext":
    auth_context = get_auth_context_from_info(info)
    if not auth_context.is_authenticated:
        raise AuthRequired()
    return auth_context


def require_capability(info: strawberry.Info, capability: RequiredCapability) -> "AuthContext":
    """Ensure the current user holds `capability` (or BYPASS)."""
    auth_context = require_authenticated(info)
    if not auth_context.has_capability(capability.value):
        logger.info(
            "Access denied, missing capability",
            capability=capability.value,
            user_id=str(auth_context.user_id),
        )
        raise ForbiddenAccess(capability=capability.value)
    return auth_context


def can_read_token(auth_context: "AuthContext", user_id: UUID) -> bool:
    """A user can read their own token; BYPASS holders can read anyone's."""
    if not auth_context.is_authenticated:
        return False
    return auth_context.user_id == user_id or BYPASS in auth_context.capabilities
