"""
Role GraphQL type definitions
"""

from datetime import datetime
from enum import Enum
from uuid import UUID

import strawberry

from ...dbmodels import Roles
from .capability import Capability
from .common import EditContext, EditInput, EditUserContext, Relation, RelationAddInput


@strawberry.enum
class RolesOrdering(Enum):
    NAME = "name"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


@strawberry.type
class Role:
    """Role type for GraphQL API."""

    id: UUID
    name: str
    description: str | None
    default_assignation: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, role: Roles) -> "Role":
        return cls(
            id=role.id,
            name=role.name,
            description=role.description,
            default_assignation=role.default_assignation,
            created_at=role.created_at,
            updated_at=role.updated_at,
        )

    @strawberry.field
    async def capabilities(self, info: strawberry.Info) -> list[Capability]:
        """Capabilities granted by this role."""
        from ..resolvers.role import resolve_role_capabilities

        return await resolve_role_capabilities(self, info)

    @strawberry.field
    async def edit_context(self, info: strawberry.Info) -> list[EditUserContext]:
        """Users currently editing this role."""
        from ..resolvers.edit_context import resolve_edit_context

        return await resolve_edit_context(self.id, info)


@strawberry.input
class RoleAddInput:
    name: str
    description: str | None = None
    default_assignation: bool = False
    capabilities: list[str] | None = None


@strawberry.type
class RoleEditMutations:
    """Operations available on one role (`roleEdit(id)`)."""

    id: strawberry.Private[UUID]

    @strawberry.field
    async def delete(self, info: strawberry.Info) -> UUID:
        from ..resolvers.role import delete_role

        return await delete_role(info, self.id)

    @strawberry.field
    async def field_patch(self, info: strawberry.Info, input: EditInput) -> Role:
        from ..resolvers.role import patch_role_field

        return await patch_role_field(info, self.id, input)

    @strawberry.field
    async def context_patch(self, info: strawberry.Info, input: EditContext) -> Role:
        from ..resolvers.role import patch_role_context

        return await patch_role_context(info, self.id, input)

    @strawberry.field
    async def context_clean(self, info: strawberry.Info) -> Role:
        from ..resolvers.role import clean_role_context

        return await clean_role_context(info, self.id)

    @strawberry.field
    async def relation_add(self, info: strawberry.Info, input: RelationAddInput) -> Relation:
        from ..resolvers.role import add_role_relation

        return await add_role_relation(info, self.id, input)

    @strawberry.field
    async def remove_capability(self, info: strawberry.Info, name: str) -> Role:
        from ..resolvers.role import remove_role_capability

        return await remove_role_capability(info, self.id, name)
