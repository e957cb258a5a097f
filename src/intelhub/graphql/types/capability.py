"""
Capability GraphQL type definitions
"""

from datetime import datetime
from uuid import UUID

import strawberry

from ...dbmodels import Capabilities


@strawberry.type
class Capability:
    """A named permission granted to roles."""

    id: UUID
    name: str
    description: str | None
    ordering: int
    created_at: datetime

    @classmethod
    def from_model(cls, capability: Capabilities) -> "Capability":
        return cls(
            id=capability.id,
            name=capability.name,
            description=capability.description,
            ordering=capability.ordering,
            created_at=capability.created_at,
        )
