"""
Group GraphQL type definitions
"""

from datetime import datetime
from uuid import UUID

import strawberry

from ...dbmodels import Groups


@strawberry.type
class Group:
    id: UUID
    name: str
    description: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, group: Groups) -> "Group":
        return cls(
            id=group.id,
            name=group.name,
            description=group.description,
            created_at=group.created_at,
            updated_at=group.updated_at,
        )
