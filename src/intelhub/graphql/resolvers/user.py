from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

from ...database.connection import get_async_session
from ...domain import edit_context, groups, users
from ...errors import ForbiddenAccess, MissingReferenceError
from ..access_control import (
    RequiredCapability,
    can_read_token,
    require_authenticated,
    require_capability,
)

if TYPE_CHECKING:
    from ..types.capability import Capability
    from ..types.common import (
        Connection,
        EditContext,
        EditInput,
        OrderingMode,
        Relation,
        RelationAddInput,
    )
    from ..types.group import Group
    from ..types.role import Role
    from ..types.user import PersonAddInput, User, UserAddInput


def _to_user(model) -> User:
    from ..types.user import User as UserType

    return UserType.from_model(model)


# Query resolvers
async def resolve_user_by_id(info: strawberry.Info, id: UUID) -> User | None:
    require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    async with get_async_session() as session:
        user = await users.find_user_by_id(session, id)
        return _to_user(user) if user else None


async def resolve_users(
    info: strawberry.Info,
    first: int | None,
    after: str | None,
    order_by: str,
    order_mode: OrderingMode,
    search: str | None,
) -> Connection[User]:
    require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    from ..types.common import build_connection

    async with get_async_session() as session:
        page = await users.find_users(
            session,
            first=first,
            after=after,
            order_by=order_by,
            order_mode=order_mode.to_domain(),
            search=search,
        )
        return build_connection(page, _to_user)


async def resolve_current_user(info: strawberry.Info) -> User:
    auth_context = require_authenticated(info)
    async with get_async_session() as session:
        user = await users.find_user_by_id(session, auth_context.user_id)
        if user is None:
            raise MissingReferenceError("User not found", id=str(auth_context.user_id))
        return _to_user(user)


# Field resolvers
async def resolve_user_groups(user: User, info: strawberry.Info) -> list[Group]:
    from ..types.group import Group as GroupType

    async with get_async_session() as session:
        return [GroupType.from_model(group) for group in await groups.groups(session, user.id)]


async def resolve_user_roles(user: User, info: strawberry.Info) -> list[Role]:
    from ..types.role import Role as RoleType

    async with get_async_session() as session:
        return [RoleType.from_model(role) for role in await users.get_roles(session, user.id)]


async def resolve_user_capabilities(user: User, info: strawberry.Info) -> list[Capability]:
    from ..types.capability import Capability as CapabilityType

    async with get_async_session() as session:
        return [
            CapabilityType.from_model(capability)
            for capability in await users.get_capabilities(session, user.id)
        ]


async def resolve_user_token(user: User, info: strawberry.Info) -> str:
    auth_context = require_authenticated(info)
    if not can_read_token(auth_context, user.id):
        raise ForbiddenAccess()
    async with get_async_session() as session:
        model = await users.get_user_or_fail(session, user.id)
        return str(model.api_token)


# Mutations
async def add_user(info: strawberry.Info, input: UserAddInput) -> User:
    require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    async with get_async_session() as session:
        user = await users.add_user(
            session,
            name=input.name,
            email=input.email,
            password=input.password,
            firstname=input.firstname,
            lastname=input.lastname,
            description=input.description,
            language=input.language,
            roles=input.roles or [],
        )
        return _to_user(user)


async def add_person(info: strawberry.Info, input: PersonAddInput) -> User:
    require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    async with get_async_session() as session:
        person = await users.add_person(
            session,
            name=input.name,
            email=input.email,
            firstname=input.firstname,
            lastname=input.lastname,
            description=input.description,
        )
        return _to_user(person)


async def edit_me(info: strawberry.Info, input: EditInput) -> User:
    auth_context = require_authenticated(info)
    async with get_async_session() as session:
        user = await users.me_edit_field(
            session, auth_context.user_id, input.key, input.value or []
        )
        return _to_user(user)


async def delete_user(info: strawberry.Info, id: UUID) -> UUID:
    require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    async with get_async_session() as session:
        return await users.user_delete(session, id)


async def patch_user_field(info: strawberry.Info, id: UUID, input: EditInput) -> User:
    require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    async with get_async_session() as session:
        user = await users.user_edit_field(session, id, input.key, input.value or [])
        return _to_user(user)


async def patch_user_context(info: strawberry.Info, id: UUID, input: EditContext) -> User:
    auth_context = require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    async with get_async_session() as session:
        user = await users.get_user_or_fail(session, id)
    await edit_context.set_edit_context(
        auth_context.user_id, auth_context.user_name or "", id, input.focus_on
    )
    return _to_user(user)


async def clean_user_context(info: strawberry.Info, id: UUID) -> User:
    auth_context = require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    async with get_async_session() as session:
        user = await users.get_user_or_fail(session, id)
    await edit_context.clean_edit_context(auth_context.user_id, id)
    return _to_user(user)


async def renew_user_token(info: strawberry.Info, id: UUID) -> User:
    require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    async with get_async_session() as session:
        user = await users.user_renew_token(session, id)
        return _to_user(user)


async def remove_user_role(info: strawberry.Info, id: UUID, name: str) -> User:
    require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    async with get_async_session() as session:
        user = await users.remove_role(session, id, name)
        return _to_user(user)


async def add_user_relation(info: strawberry.Info, id: UUID, input: RelationAddInput) -> Relation:
    require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    from ..types.common import Relation as RelationType

    async with get_async_session() as session:
        relation = await users.user_add_relation(session, id, input.to_id, input.through)
        return RelationType.from_model(relation)


async def delete_user_relation(info: strawberry.Info, id: UUID, relation_id: UUID) -> User:
    require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    async with get_async_session() as session:
        user = await users.user_delete_relation(session, id, relation_id)
        return _to_user(user)
