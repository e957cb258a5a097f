"""Offset-cursor pagination shared by list queries."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import FunctionalError

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 500


class OrderMode(Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class Page(Generic[T]):
    items: list[T]
    offset: int
    global_count: int

    @property
    def has_next_page(self) -> bool:
        return self.offset + len(self.items) < self.global_count

    @property
    def has_previous_page(self) -> bool:
        return self.offset > 0

    def cursor(self, index: int) -> str:
        return encode_cursor(self.offset + index + 1)


def encode_cursor(position: int) -> str:
    return base64.b64encode(f"offset:{position}".encode()).decode("ascii")


def decode_cursor(cursor: str | None) -> int:
    """Decode an `after` cursor into the offset of the next element."""
    if not cursor:
        return 0
    try:
        prefix, _, value = base64.b64decode(cursor.encode("ascii")).decode().partition(":")
        if prefix != "offset":
            raise ValueError(prefix)
        return max(int(value), 0)
    except ValueError as e:
        raise FunctionalError("Invalid pagination cursor", cursor=cursor) from e


async def paginate(
    db: AsyncSession,
    stmt: Select[Any],
    *,
    first: int | None,
    after: str | None,
) -> Page[Any]:
    """Run `stmt` with offset/limit taken from Relay-style arguments."""
    limit = DEFAULT_PAGE_SIZE if first is None else min(max(first, 0), MAX_PAGE_SIZE)
    offset = decode_cursor(after)

    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    global_count = (await db.execute(count_stmt)).scalar_one()

    result = await db.execute(stmt.offset(offset).limit(limit))
    return Page(items=list(result.scalars().all()), offset=offset, global_count=global_count)
