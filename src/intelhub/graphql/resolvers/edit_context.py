from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

from ...domain.edit_context import fetch_edit_context

if TYPE_CHECKING:
    from ..types.common import EditUserContext


async def resolve_edit_context(entity_id: UUID, info: strawberry.Info) -> list[EditUserContext]:
    """Users currently editing `entity_id`, as recorded in Redis."""
    from ..types.common import EditUserContext as EditUserContextType

    entries = await fetch_edit_context(entity_id)
    return [EditUserContextType.from_entry(entry) for entry in entries]
