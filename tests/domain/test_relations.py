"""Tests for typed relations between entities."""

import uuid

import pytest

from intelhub.database.connection import get_async_session
from intelhub.dbmodels import RELATION_MEMBERSHIP, RELATION_USER_ROLE
from intelhub.domain.grants import find_role_by_name
from intelhub.domain.groups import add_group
from intelhub.domain.relations import (
    add_relation,
    delete_all_relations,
    delete_relation_to_named,
    targets_of,
)
from intelhub.errors import AlreadyExistsError, FunctionalError, MissingReferenceError


class TestAddRelation:
    @pytest.mark.asyncio
    async def test_unsupported_type(self, analyst_user):
        async with get_async_session() as db:
            with pytest.raises(FunctionalError, match="Unsupported relation type"):
                await add_relation(db, analyst_user.id, uuid.uuid4(), "owns")

    @pytest.mark.asyncio
    async def test_missing_target(self, analyst_user):
        async with get_async_session() as db:
            with pytest.raises(MissingReferenceError):
                await add_relation(db, analyst_user.id, uuid.uuid4(), RELATION_MEMBERSHIP)

    @pytest.mark.asyncio
    async def test_target_of_wrong_type(self, analyst_user):
        """A role id is not a valid membership target."""
        async with get_async_session() as db:
            role = await find_role_by_name(db, "Administrator")
            with pytest.raises(MissingReferenceError):
                await add_relation(db, analyst_user.id, role.id, RELATION_MEMBERSHIP)

    @pytest.mark.asyncio
    async def test_duplicate(self, analyst_user):
        async with get_async_session() as db:
            role = await find_role_by_name(db, "Default")
            with pytest.raises(AlreadyExistsError):
                await add_relation(db, analyst_user.id, role.id, RELATION_USER_ROLE)


class TestDeleteRelations:
    @pytest.mark.asyncio
    async def test_delete_to_named(self, analyst_user):
        async with get_async_session() as db:
            role = await find_role_by_name(db, "Default")
            assert await delete_relation_to_named(
                db, analyst_user.id, RELATION_USER_ROLE, role.id
            ) == 1
            assert await delete_relation_to_named(
                db, analyst_user.id, RELATION_USER_ROLE, role.id
            ) == 0
            assert (
                await delete_relation_to_named(db, analyst_user.id, RELATION_USER_ROLE, None) == 0
            )

    @pytest.mark.asyncio
    async def test_delete_all_touching_entity(self, analyst_user):
        async with get_async_session() as db:
            group = await add_group(db, name="Analysts")
            await add_relation(db, analyst_user.id, group.id, RELATION_MEMBERSHIP)

            await delete_all_relations(db, group.id)

            assert await targets_of(db, analyst_user.id, RELATION_MEMBERSHIP) == []
            assert len(await targets_of(db, analyst_user.id, RELATION_USER_ROLE)) == 1
