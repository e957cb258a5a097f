from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

import strawberry

from ...database.connection import get_async_session
from ...domain import edit_context, grants
from ...logging import get_logger
from ..access_control import RequiredCapability, require_capability

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
    from ..types.role import Role, RoleAddInput

logger = get_logger(__name__)


def _to_role(model) -> Role:
    from ..types.role import Role as RoleType

    return RoleType.from_model(model)


def _to_capability(model) -> Capability:
    from ..types.capability import Capability as CapabilityType

    return CapabilityType.from_model(model)


# Query resolvers
async def resolve_role_by_id(info: strawberry.Info, id: UUID) -> Role | None:
    require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    async with get_async_session() as session:
        role = await grants.find_role_by_id(session, id)
        return _to_role(role) if role else None


async def resolve_roles(
    info: strawberry.Info,
    first: int | None,
    after: str | None,
    order_by: str,
    order_mode: OrderingMode,
    search: str | None,
) -> Connection[Role]:
    require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    from ..types.common import build_connection

    async with get_async_session() as session:
        page = await grants.find_roles(
            session,
            first=first,
            after=after,
            order_by=order_by,
            order_mode=order_mode.to_domain(),
            search=search,
        )
        return build_connection(page, _to_role)


async def resolve_capabilities(
    info: strawberry.Info, first: int | None, after: str | None
) -> Connection[Capability]:
    require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    from ..types.common import build_connection

    async with get_async_session() as session:
        page = await grants.find_capabilities(session, first=first, after=after)
        return build_connection(page, _to_capability)


# Field resolvers
async def resolve_role_capabilities(role: Role, info: strawberry.Info) -> list[Capability]:
    async with get_async_session() as session:
        return [
            _to_capability(capability)
            for capability in await grants.get_role_capabilities(session, role.id)
        ]


# Mutations
async def add_role(info: strawberry.Info, input: RoleAddInput) -> Role:
    require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    async with get_async_session() as session:
        role = await grants.add_role(
            session,
            name=input.name,
            description=input.description,
            default_assignation=input.default_assignation,
            capabilities=input.capabilities or [],
        )
        return _to_role(role)


async def delete_role(info: strawberry.Info, id: UUID) -> UUID:
    require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    async with get_async_session() as session:
        return await grants.role_delete(session, id)


async def patch_role_field(info: strawberry.Info, id: UUID, input: EditInput) -> Role:
    require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    async with get_async_session() as session:
        role = await grants.role_edit_field(session, id, input.key, input.value or [])
        logger.info("Role field updated", role_id=str(id), key=input.key)
        return _to_role(role)


async def patch_role_context(info: strawberry.Info, id: UUID, input: EditContext) -> Role:
    auth_context = require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    async with get_async_session() as session:
        role = await grants.get_role_or_fail(session, id)
    await edit_context.set_edit_context(
        auth_context.user_id, auth_context.user_name or "", id, input.focus_on
    )
    return _to_role(role)


async def clean_role_context(info: strawberry.Info, id: UUID) -> Role:
    auth_context = require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    async with get_async_session() as session:
        role = await grants.get_role_or_fail(session, id)
    await edit_context.clean_edit_context(auth_context.user_id, id)
    return _to_role(role)


async def add_role_relation(info: strawberry.Info, id: UUID, input: RelationAddInput) -> Relation:
    require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    from ..types.common import Relation as RelationType

    async with get_async_session() as session:
        relation = await grants.role_add_relation(session, id, input.to_id, input.through)
        return RelationType.from_model(relation)


async def remove_role_capability(info: strawberry.Info, id: UUID, name: str) -> Role:
    require_capability(info, RequiredCapability.SETTINGS_SETACCESSES)
    async with get_async_session() as session:
        role = await grants.role_remove_capability(session, id, name)
        return _to_role(role)
