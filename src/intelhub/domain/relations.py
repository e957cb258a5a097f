"""Typed edges between access-management entities."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import (
    RELATION_MEMBERSHIP,
    RELATION_ROLE_CAPABILITY,
    RELATION_USER_ROLE,
    Capabilities,
    Groups,
    Relations,
    Roles,
    Users,
)
from ..errors import AlreadyExistsError, FunctionalError, MissingReferenceError
from ..logging import get_logger

logger = get_logger(__name__)

# relationship type -> (source model, target model)
RELATION_ENDPOINTS = {
    RELATION_MEMBERSHIP: (Users, Groups),
    RELATION_USER_ROLE: (Users, Roles),
    RELATION_ROLE_CAPABILITY: (Roles, Capabilities),
}


async def add_relation(
    db: AsyncSession, from_id: UUID, to_id: UUID, relationship_type: str
) -> Relations:
    """Create an edge after checking both endpoints exist with the expected type."""
    endpoints = RELATION_ENDPOINTS.get(relationship_type)
    if endpoints is None:
        raise FunctionalError(f"Unsupported relation type: {relationship_type}")

    source_model, target_model = endpoints
    if await db.get(source_model, from_id) is None:
        raise MissingReferenceError(
            f"Cannot add {relationship_type} relation, source not found", id=str(from_id)
        )
    if await db.get(target_model, to_id) is None:
        raise MissingReferenceError(
            f"Cannot add {relationship_type} relation, target not found", id=str(to_id)
        )

    existing = await db.execute(
        select(Relations).where(
            and_(
                Relations.relationship_type == relationship_type,
                Relations.from_id == from_id,
                Relations.to_id == to_id,
            )
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise AlreadyExistsError(
            f"Relation {relationship_type} already exists", from_id=str(from_id), to_id=str(to_id)
        )

    relation = Relations(relationship_type=relationship_type, from_id=from_id, to_id=to_id)
    db.add(relation)
    await db.flush()
    logger.info(
        "Relation created",
        relation_id=str(relation.id),
        relationship_type=relationship_type,
        from_id=str(from_id),
        to_id=str(to_id),
    )
    return relation


async def delete_relation(db: AsyncSession, from_id: UUID, relation_id: UUID) -> None:
    """Delete an edge, only if it starts at `from_id`."""
    relation = await db.get(Relations, relation_id)
    if relation is None or relation.from_id != from_id:
        raise MissingReferenceError("Relation not found", id=str(relation_id))
    await db.delete(relation)
    await db.flush()


async def delete_relation_to_named(
    db: AsyncSession, from_id: UUID, relationship_type: str, target_id: UUID | None
) -> int:
    """Delete the edge of the given type from `from_id` to `target_id`.

    Returns the number of removed rows (0 when the target or edge is absent).
    """
    if target_id is None:
        return 0
    result = await db.execute(
        delete(Relations).where(
            and_(
                Relations.relationship_type == relationship_type,
                Relations.from_id == from_id,
                Relations.to_id == target_id,
            )
        )
    )
    return result.rowcount or 0


async def delete_all_relations(db: AsyncSession, entity_id: UUID) -> None:
    """Remove every edge touching the entity (used on entity deletion)."""
    await db.execute(
        delete(Relations).where(or_(Relations.from_id == entity_id, Relations.to_id == entity_id))
    )


async def targets_of(db: AsyncSession, from_id: UUID, relationship_type: str) -> list[UUID]:
    result = await db.execute(
        select(Relations.to_id).where(
            and_(
                Relations.relationship_type == relationship_type,
                Relations.from_id == from_id,
            )
        )
    )
    return list(result.scalars().all())
