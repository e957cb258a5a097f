"""Live edit contexts: which users are currently editing an entity, and where.

Stored in Redis as one hash per entity (`edit:<entity_id>`), one field per
editing user, so concurrent editors never overwrite each other. The hash
expires after `edit_context_ttl` seconds without activity.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from uuid import UUID

from ..config import settings
from ..logging import get_logger
from ..redis_pool import get_redis_client

logger = get_logger(__name__)


@dataclass
class EditContextEntry:
    name: str
    focus_on: str | None = None


def edit_context_key(entity_id: UUID | str) -> str:
    return f"edit:{entity_id}"


async def set_edit_context(
    user_id: UUID, user_name: str, entity_id: UUID, focus_on: str | None
) -> None:
    client = get_redis_client()
    key = edit_context_key(entity_id)
    payload = json.dumps({"name": user_name, "focusOn": focus_on})
    await client.hset(key, str(user_id), payload)
    await client.expire(key, settings.edit_context_ttl)


async def clean_edit_context(user_id: UUID, entity_id: UUID) -> None:
    client = get_redis_client()
    await client.hdel(edit_context_key(entity_id), str(user_id))


async def fetch_edit_context(entity_id: UUID) -> list[EditContextEntry]:
    client = get_redis_client()
    raw = await client.hgetall(edit_context_key(entity_id))
    entries = []
    for user_id, value in sorted(raw.items()):
        try:
            data = json.loads(value)
        except json.JSONDecodeError:
            logger.warning(
                "Dropping malformed edit context", entity_id=str(entity_id), user_id=user_id
            )
            continue
        entries.append(EditContextEntry(name=data.get("name", ""), focus_on=data.get("focusOn")))
    return entries
