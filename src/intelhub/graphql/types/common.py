"""
Shared GraphQL types: pagination, edit inputs, edit contexts and relations
"""

from datetime import datetime
from enum import Enum
from typing import Generic, TypeVar
from uuid import UUID

import strawberry

from ...dbmodels import Relations
from ...domain.edit_context import EditContextEntry
from ...domain.pagination import OrderMode, Page

T = TypeVar("T")


@strawberry.enum
class OrderingMode(Enum):
    asc = "asc"
    desc = "desc"

    def to_domain(self) -> OrderMode:
        return OrderMode(self.value)


@strawberry.type
class PageInfo:
    start_cursor: str | None
    end_cursor: str | None
    has_next_page: bool
    has_previous_page: bool
    global_count: int


@strawberry.type
class Edge(Generic[T]):
    cursor: str
    node: T


@strawberry.type
class Connection(Generic[T]):
    """Relay-style connection (UserConnection, RoleConnection, ...)."""

    edges: list[Edge[T]]
    page_info: PageInfo


def build_connection(page: Page, convert) -> Connection:
    edges = [
        Edge(cursor=page.cursor(index), node=convert(item)) for index, item in enumerate(page.items)
    ]
    return Connection(
        edges=edges,
        page_info=PageInfo(
            start_cursor=edges[0].cursor if edges else None,
            end_cursor=edges[-1].cursor if edges else None,
            has_next_page=page.has_next_page,
            has_previous_page=page.has_previous_page,
            global_count=page.global_count,
        ),
    )


@strawberry.input
class EditInput:
    """Patch of one attribute; single-valued attributes use the first value."""

    key: str
    value: list[str] | None = None


@strawberry.input
class EditContext:
    focus_on: str | None = None


@strawberry.input
class RelationAddInput:
    to_id: UUID
    through: str


@strawberry.type
class EditUserContext:
    name: str
    focus_on: str | None

    @classmethod
    def from_entry(cls, entry: EditContextEntry) -> "EditUserContext":
        return cls(name=entry.name, focus_on=entry.focus_on)


@strawberry.type
class Relation:
    id: UUID
    relationship_type: str
    from_id: UUID
    to_id: UUID
    created_at: datetime

    @classmethod
    def from_model(cls, relation: Relations) -> "Relation":
        return cls(
            id=relation.id,
            relationship_type=relation.relationship_type,
            from_id=relation.from_id,
            to_id=relation.to_id,
            created_at=relation.created_at,
        )
