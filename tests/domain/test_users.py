"""Tests for user management against a real database."""

import uuid

import pytest
from sqlalchemy import select

from intelhub.auth.passwords import verify_password
from intelhub.database.connection import get_async_session
from intelhub.database.seed_data import ADMINISTRATOR_ROLE, DEFAULT_ROLE
from intelhub.dbmodels import RELATION_MEMBERSHIP, Relations, ViewParameters
from intelhub.domain import users
from intelhub.domain.groups import add_group, groups
from intelhub.domain.pagination import OrderMode
from intelhub.errors import AlreadyExistsError, FunctionalError, MissingReferenceError


class TestAddUser:
    @pytest.mark.asyncio
    async def test_default_roles_assigned(self, analyst_user):
        """New users receive every role flagged default_assignation."""
        async with get_async_session() as db:
            roles = await users.get_roles(db, analyst_user.id)

        assert [role.name for role in roles] == [DEFAULT_ROLE]

    @pytest.mark.asyncio
    async def test_named_roles_added_to_defaults(self, admin_user):
        async with get_async_session() as db:
            roles = await users.get_roles(db, admin_user.id)

        assert {role.name for role in roles} == {ADMINISTRATOR_ROLE, DEFAULT_ROLE}

    @pytest.mark.asyncio
    async def test_password_is_hashed(self, analyst_user):
        assert analyst_user.password_hash != "analyst-password"
        assert verify_password("analyst-password", analyst_user.password_hash)
        assert analyst_user.external is False
        assert analyst_user.language == "auto"

    @pytest.mark.asyncio
    async def test_duplicate_email(self, analyst_user):
        async with get_async_session() as db:
            with pytest.raises(AlreadyExistsError):
                await users.add_user(
                    db, name="copy", email="analyst@intelhub.io", password="password"
                )

    @pytest.mark.asyncio
    async def test_unknown_role(self, seeded_platform):
        async with get_async_session() as db:
            with pytest.raises(MissingReferenceError):
                await users.add_user(
                    db, name="x", email="x@intelhub.io", password="password", roles=["Nope"]
                )

    @pytest.mark.asyncio
    async def test_password_required(self, seeded_platform):
        async with get_async_session() as db:
            with pytest.raises(FunctionalError):
                await users.add_user(db, name="x", email="x@intelhub.io", password="")

    @pytest.mark.asyncio
    async def test_capabilities_are_distinct_union(self, admin_user):
        async with get_async_session() as db:
            capabilities = await users.get_capabilities(db, admin_user.id)

        names = [capability.name for capability in capabilities]
        assert sorted(names) == ["BYPASS", "EXPLORE", "KNOWLEDGE"]
        assert len(names) == len(set(names))


class TestAddPerson:
    @pytest.mark.asyncio
    async def test_person_is_external_without_password(self, seeded_platform):
        async with get_async_session() as db:
            person = await users.add_person(db, name="John Doe")

        assert person.external is True
        assert person.password_hash is None
        assert person.email.endswith("@person.intelhub")

    @pytest.mark.asyncio
    async def test_person_has_no_roles(self, seeded_platform):
        async with get_async_session() as db:
            person = await users.add_person(db, name="Jane Doe", email="jane@example.com")
            assert await users.get_roles(db, person.id) == []


class TestFindUsers:
    @pytest.mark.asyncio
    async def test_ordering_and_search(self, admin_user, analyst_user):
        async with get_async_session() as db:
            page = await users.find_users(db, order_by="email", order_mode=OrderMode.DESC)
            assert [user.email for user in page.items] == [
                "analyst@intelhub.io",
                "admin@intelhub.io",
            ]
            assert page.global_count == 2

            page = await users.find_users(db, search="ANALYST")
            assert [user.id for user in page.items] == [analyst_user.id]

    @pytest.mark.asyncio
    async def test_unknown_ordering(self, database):
        async with get_async_session() as db:
            with pytest.raises(FunctionalError):
                await users.find_users(db, order_by="password_hash")

    @pytest.mark.asyncio
    async def test_find_by_token(self, analyst_user):
        async with get_async_session() as db:
            found = await users.find_user_by_token(db, analyst_user.api_token)
            assert found.id == analyst_user.id
            assert await users.find_user_by_token(db, uuid.uuid4()) is None


class TestUserEdit:
    @pytest.mark.asyncio
    async def test_edit_single_valued_field(self, analyst_user):
        async with get_async_session() as db:
            user = await users.user_edit_field(db, analyst_user.id, "firstname", ["Ada", "x"])

        assert user.firstname == "Ada"

    @pytest.mark.asyncio
    async def test_edit_password_rehashes(self, analyst_user):
        async with get_async_session() as db:
            user = await users.user_edit_field(db, analyst_user.id, "password", ["n3w"])

        assert verify_password("n3w", user.password_hash)
        assert not verify_password("analyst-password", user.password_hash)

    @pytest.mark.asyncio
    async def test_unknown_key(self, analyst_user):
        async with get_async_session() as db:
            with pytest.raises(FunctionalError):
                await users.user_edit_field(db, analyst_user.id, "api_token", ["x"])

    @pytest.mark.asyncio
    async def test_name_cannot_be_emptied(self, analyst_user):
        async with get_async_session() as db:
            with pytest.raises(FunctionalError):
                await users.user_edit_field(db, analyst_user.id, "name", [])

    @pytest.mark.asyncio
    async def test_email_taken(self, admin_user, analyst_user):
        async with get_async_session() as db:
            with pytest.raises(AlreadyExistsError):
                await users.user_edit_field(
                    db, analyst_user.id, "email", ["admin@intelhub.io"]
                )

    @pytest.mark.asyncio
    async def test_missing_user(self, database):
        async with get_async_session() as db:
            with pytest.raises(MissingReferenceError):
                await users.user_edit_field(db, uuid.uuid4(), "name", ["x"])

    @pytest.mark.asyncio
    async def test_renew_token(self, analyst_user):
        previous_token = analyst_user.api_token
        async with get_async_session() as db:
            user = await users.user_renew_token(db, analyst_user.id)

        assert user.api_token != previous_token


class TestUserRelations:
    @pytest.mark.asyncio
    async def test_remove_role(self, admin_user):
        async with get_async_session() as db:
            await users.remove_role(db, admin_user.id, ADMINISTRATOR_ROLE)
            roles = await users.get_roles(db, admin_user.id)

        assert [role.name for role in roles] == [DEFAULT_ROLE]

    @pytest.mark.asyncio
    async def test_remove_unknown_role_is_noop(self, analyst_user):
        async with get_async_session() as db:
            user = await users.remove_role(db, analyst_user.id, "Nope")
            assert user.id == analyst_user.id
            assert len(await users.get_roles(db, analyst_user.id)) == 1

    @pytest.mark.asyncio
    async def test_membership_relation(self, analyst_user):
        async with get_async_session() as db:
            group = await add_group(db, name="Analysts")
            relation = await users.user_add_relation(
                db, analyst_user.id, group.id, RELATION_MEMBERSHIP
            )
            assert [g.name for g in await groups(db, analyst_user.id)] == ["Analysts"]

            await users.user_delete_relation(db, analyst_user.id, relation.id)
            assert await groups(db, analyst_user.id) == []

    @pytest.mark.asyncio
    async def test_relation_type_not_allowed(self, analyst_user):
        async with get_async_session() as db:
            with pytest.raises(FunctionalError):
                await users.user_add_relation(
                    db, analyst_user.id, uuid.uuid4(), "role_capability"
                )

    @pytest.mark.asyncio
    async def test_delete_relation_of_other_entity(self, admin_user, analyst_user):
        """A relation can only be deleted through the entity it starts from."""
        async with get_async_session() as db:
            relation = (
                await db.execute(select(Relations).where(Relations.from_id == admin_user.id))
            ).scalars().first()

            with pytest.raises(MissingReferenceError):
                await users.user_delete_relation(db, analyst_user.id, relation.id)


class TestUserDelete:
    @pytest.mark.asyncio
    async def test_delete_removes_relations_and_views(self, analyst_user):
        async with get_async_session() as db:
            db.add(ViewParameters(user_id=analyst_user.id, storage_key="view", params={}))
            await db.flush()

            deleted_id = await users.user_delete(db, analyst_user.id)
            assert deleted_id == analyst_user.id

            assert await users.find_user_by_id(db, analyst_user.id) is None
            remaining = await db.execute(
                select(Relations).where(Relations.from_id == analyst_user.id)
            )
            assert remaining.scalars().all() == []
            views = await db.execute(
                select(ViewParameters).where(ViewParameters.user_id == analyst_user.id)
            )
            assert views.scalars().all() == []
