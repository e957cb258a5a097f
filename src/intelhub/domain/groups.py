"""Groups of users."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import RELATION_MEMBERSHIP, Groups, Relations
from ..errors import AlreadyExistsError


async def groups(db: AsyncSession, user_id: UUID) -> list[Groups]:
    """Groups the user is a member of."""
    stmt = (
        select(Groups)
        .join(Relations, Relations.to_id == Groups.id)
        .where(
            and_(
                Relations.relationship_type == RELATION_MEMBERSHIP,
                Relations.from_id == user_id,
            )
        )
        .order_by(Groups.name.asc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def add_group(db: AsyncSession, *, name: str, description: str | None = None) -> Groups:
    existing = await db.execute(select(Groups).where(Groups.name == name))
    if existing.scalar_one_or_none() is not None:
        raise AlreadyExistsError("Group already exists", name=name)
    group = Groups(name=name, description=description)
    db.add(group)
    await db.flush()
    return group
