"""Per-user view parameter storage backed by the `view_parameters` table."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import ViewParameters


class DatabaseViewStorage:
    """Stores one parameter bag per (user, storage key)."""

    def __init__(self, db: AsyncSession, user_id: UUID):
        self.db = db
        self.user_id = user_id

    async def _find(self, storage_key: str) -> ViewParameters | None:
        result = await self.db.execute(
            select(ViewParameters).where(
                and_(
                    ViewParameters.user_id == self.user_id,
                    ViewParameters.storage_key == storage_key,
                )
            )
        )
        return result.scalar_one_or_none()

    async def get(self, storage_key: str) -> dict[str, Any] | None:
        row = await self._find(storage_key)
        return dict(row.params) if row is not None else None

    async def set(self, storage_key: str, params: dict[str, Any]) -> None:
        row = await self._find(storage_key)
        if row is None:
            self.db.add(
                ViewParameters(user_id=self.user_id, storage_key=storage_key, params=dict(params))
            )
        else:
            row.params = dict(params)
        await self.db.flush()
