"""Tests for live edit contexts stored in Redis."""

import json
import uuid
from unittest.mock import AsyncMock, patch

import pytest

from intelhub.domain.edit_context import (
    EditContextEntry,
    clean_edit_context,
    edit_context_key,
    fetch_edit_context,
    set_edit_context,
)


@pytest.fixture
def redis_client():
    client = AsyncMock()
    with patch("intelhub.domain.edit_context.get_redis_client", return_value=client):
        yield client


class TestEditContext:
    @pytest.mark.asyncio
    async def test_set_stores_user_field_and_refreshes_ttl(self, redis_client):
        user_id, entity_id = uuid.uuid4(), uuid.uuid4()

        with patch("intelhub.domain.edit_context.settings.edit_context_ttl", 60):
            await set_edit_context(user_id, "analyst@intelhub.io", entity_id, "name")

        redis_client.hset.assert_awaited_once_with(
            f"edit:{entity_id}",
            str(user_id),
            json.dumps({"name": "analyst@intelhub.io", "focusOn": "name"}),
        )
        redis_client.expire.assert_awaited_once_with(f"edit:{entity_id}", 60)

    @pytest.mark.asyncio
    async def test_clean_removes_only_the_user(self, redis_client):
        user_id, entity_id = uuid.uuid4(), uuid.uuid4()

        await clean_edit_context(user_id, entity_id)

        redis_client.hdel.assert_awaited_once_with(edit_context_key(entity_id), str(user_id))

    @pytest.mark.asyncio
    async def test_fetch_returns_all_entries(self, redis_client):
        redis_client.hgetall.return_value = {
            "b-user": json.dumps({"name": "b@intelhub.io", "focusOn": None}),
            "a-user": json.dumps({"name": "a@intelhub.io", "focusOn": "description"}),
        }

        entries = await fetch_edit_context(uuid.uuid4())

        assert entries == [
            EditContextEntry(name="a@intelhub.io", focus_on="description"),
            EditContextEntry(name="b@intelhub.io", focus_on=None),
        ]

    @pytest.mark.asyncio
    async def test_fetch_skips_malformed_entries(self, redis_client):
        redis_client.hgetall.return_value = {
            "a-user": "{not json",
            "b-user": json.dumps({"name": "b@intelhub.io"}),
        }

        entries = await fetch_edit_context(uuid.uuid4())

        assert entries == [EditContextEntry(name="b@intelhub.io")]

    @pytest.mark.asyncio
    async def test_fetch_empty(self, redis_client):
        redis_client.hgetall.return_value = {}

        assert await fetch_edit_context(uuid.uuid4()) == []
