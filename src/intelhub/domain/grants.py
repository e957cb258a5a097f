"""Roles and capabilities."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import RELATION_ROLE_CAPABILITY, Capabilities, Relations, Roles
from ..errors import AlreadyExistsError, FunctionalError, MissingReferenceError
from ..logging import get_logger
from .fields import apply_edit, parse_bool, required, single_value
from .pagination import OrderMode, Page, paginate
from .relations import add_relation, delete_all_relations, delete_relation_to_named

logger = get_logger(__name__)


ROLE_ORDERING_COLUMNS = {
    "name": Roles.name,
    "created_at": Roles.created_at,
    "updated_at": Roles.updated_at,
}

ROLE_EDITABLE_FIELDS = {
    "name": required("name"),
    "description": single_value,
    "default_assignation": lambda value: parse_bool(single_value(value)),
}

ROLE_ALLOWED_RELATIONS = {RELATION_ROLE_CAPABILITY}


async def find_role_by_id(db: AsyncSession, role_id: UUID) -> Roles | None:
    return await db.get(Roles, role_id)


async def get_role_or_fail(db: AsyncSession, role_id: UUID) -> Roles:
    role = await db.get(Roles, role_id)
    if role is None:
        raise MissingReferenceError("Role not found", id=str(role_id))
    return role


async def find_role_by_name(db: AsyncSession, name: str) -> Roles | None:
    result = await db.execute(select(Roles).where(Roles.name == name))
    return result.scalar_one_or_none()


async def find_roles(
    db: AsyncSession,
    *,
    first: int | None = None,
    after: str | None = None,
    order_by: str = "name",
    order_mode: OrderMode = OrderMode.ASC,
    search: str | None = None,
) -> Page[Roles]:
    column = ROLE_ORDERING_COLUMNS.get(order_by)
    if column is None:
        raise FunctionalError(f"Unsupported role ordering: {order_by}")

    stmt = select(Roles)
    if search:
        stmt = stmt.where(Roles.name.ilike(f"%{search}%"))
    stmt = stmt.order_by(column.desc() if order_mode == OrderMode.DESC else column.asc(), Roles.id)
    return await paginate(db, stmt, first=first, after=after)


async def find_capabilities(
    db: AsyncSession, *, first: int | None = None, after: str | None = None
) -> Page[Capabilities]:
    stmt = select(Capabilities).order_by(Capabilities.ordering.asc(), Capabilities.name.asc())
    return await paginate(db, stmt, first=first, after=after)


async def find_capability_by_name(db: AsyncSession, name: str) -> Capabilities | None:
    result = await db.execute(select(Capabilities).where(Capabilities.name == name))
    return result.scalar_one_or_none()


async def get_role_capabilities(db: AsyncSession, role_id: UUID) -> list[Capabilities]:
    stmt = (
        select(Capabilities)
        .join(Relations, Relations.to_id == Capabilities.id)
        .where(
            and_(
                Relations.relationship_type == RELATION_ROLE_CAPABILITY,
                Relations.from_id == role_id,
            )
        )
        .order_by(Capabilities.ordering.asc(), Capabilities.name.asc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def add_role(
    db: AsyncSession,
    *,
    name: str,
    description: str | None = None,
    default_assignation: bool = False,
    capabilities: Sequence[str] = (),
) -> Roles:
    """Create a role and attach the named capabilities."""
    if await find_role_by_name(db, name) is not None:
        raise AlreadyExistsError("Role already exists", name=name)

    role = Roles(name=name, description=description, default_assignation=default_assignation)
    db.add(role)
    await db.flush()

    for capability_name in capabilities:
        capability = await find_capability_by_name(db, capability_name)
        if capability is None:
            raise MissingReferenceError("Capability not found", name=capability_name)
        await add_relation(db, role.id, capability.id, RELATION_ROLE_CAPABILITY)

    logger.info("Role created", role_id=str(role.id), name=name, capabilities=list(capabilities))
    return role


async def role_edit_field(db: AsyncSession, role_id: UUID, key: str, value: list[str]) -> Roles:
    role = await get_role_or_fail(db, role_id)
    if key == "name":
        other = await find_role_by_name(db, single_value(value) or "")
        if other is not None and other.id != role.id:
            raise AlreadyExistsError("Role already exists", name=other.name)
    apply_edit(role, ROLE_EDITABLE_FIELDS, key, value)
    await db.flush()
    return role


async def role_delete(db: AsyncSession, role_id: UUID) -> UUID:
    role = await get_role_or_fail(db, role_id)
    await delete_all_relations(db, role.id)
    await db.delete(role)
    await db.flush()
    logger.info("Role deleted", role_id=str(role_id))
    return role_id


async def role_add_relation(
    db: AsyncSession, role_id: UUID, to_id: UUID, through: str
) -> Relations:
    if through not in ROLE_ALLOWED_RELATIONS:
        raise FunctionalError(f"Cannot add relation {through} to a role")
    return await add_relation(db, role_id, to_id, through)


async def role_remove_capability(db: AsyncSession, role_id: UUID, capability_name: str) -> Roles:
    role = await get_role_or_fail(db, role_id)
    capability = await find_capability_by_name(db, capability_name)
    removed = await delete_relation_to_named(
        db, role.id, RELATION_ROLE_CAPABILITY, capability.id if capability else None
    )
    logger.info(
        "Capability removed from role",
        role_id=str(role_id),
        capability=capability_name,
        removed=removed,
    )
    return role
