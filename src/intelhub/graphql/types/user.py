"""
User GraphQL type definitions
"""

from datetime import datetime
from enum import Enum
from uuid import UUID

import strawberry

from ...dbmodels import Users
from .capability import Capability
from .common import EditContext, EditInput, EditUserContext, Relation, RelationAddInput
from .group import Group
from .role import Role


@strawberry.enum
class UsersOrdering(Enum):
    NAME = "name"
    EMAIL = "email"
    FIRSTNAME = "firstname"
    LASTNAME = "lastname"
    CREATED_AT = "created_at"


@strawberry.type
class User:
    """User type for GraphQL API."""

    id: UUID
    name: str
    email: str
    firstname: str | None
    lastname: str | None
    description: str | None
    language: str
    external: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, user: Users) -> "User":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            firstname=user.firstname,
            lastname=user.lastname,
            description=user.description,
            language=user.language,
            external=user.external,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    @strawberry.field
    async def groups(self, info: strawberry.Info) -> list[Group]:
        from ..resolvers.user import resolve_user_groups

        return await resolve_user_groups(self, info)

    @strawberry.field
    async def roles(self, info: strawberry.Info) -> list[Role]:
        from ..resolvers.user import resolve_user_roles

        return await resolve_user_roles(self, info)

    @strawberry.field
    async def capabilities(self, info: strawberry.Info) -> list[Capability]:
        """Union of the capabilities of all the user's roles."""
        from ..resolvers.user import resolve_user_capabilities

        return await resolve_user_capabilities(self, info)

    @strawberry.field
    async def token(self, info: strawberry.Info) -> str:
        """API token; readable by the user themselves or a BYPASS holder."""
        from ..resolvers.user import resolve_user_token

        return await resolve_user_token(self, info)

    @strawberry.field
    async def edit_context(self, info: strawberry.Info) -> list[EditUserContext]:
        from ..resolvers.edit_context import resolve_edit_context

        return await resolve_edit_context(self.id, info)


@strawberry.input
class UserLoginInput:
    email: str
    password: str


@strawberry.input
class UserAddInput:
    name: str
    email: str
    password: str
    firstname: str | None = None
    lastname: str | None = None
    description: str | None = None
    language: str | None = None
    roles: list[str] | None = None


@strawberry.input
class PersonAddInput:
    name: str
    email: str | None = None
    firstname: str | None = None
    lastname: str | None = None
    description: str | None = None


@strawberry.type
class UserEditMutations:
    """Operations available on one user (`userEdit(id)`)."""

    id: strawberry.Private[UUID]

    @strawberry.field
    async def delete(self, info: strawberry.Info) -> UUID:
        from ..resolvers.user import delete_user

        return await delete_user(info, self.id)

    @strawberry.field
    async def field_patch(self, info: strawberry.Info, input: EditInput) -> User:
        from ..resolvers.user import patch_user_field

        return await patch_user_field(info, self.id, input)

    @strawberry.field
    async def context_patch(self, info: strawberry.Info, input: EditContext) -> User:
        from ..resolvers.user import patch_user_context

        return await patch_user_context(info, self.id, input)

    @strawberry.field
    async def context_clean(self, info: strawberry.Info) -> User:
        from ..resolvers.user import clean_user_context

        return await clean_user_context(info, self.id)

    @strawberry.field
    async def token_renew(self, info: strawberry.Info) -> User:
        from ..resolvers.user import renew_user_token

        return await renew_user_token(info, self.id)

    @strawberry.field
    async def remove_role(self, info: strawberry.Info, name: str) -> User:
        from ..resolvers.user import remove_user_role

        return await remove_user_role(info, self.id, name)

    @strawberry.field
    async def relation_add(self, info: strawberry.Info, input: RelationAddInput) -> Relation:
        from ..resolvers.user import add_user_relation

        return await add_user_relation(info, self.id, input)

    @strawberry.field
    async def relation_delete(self, info: strawberry.Info, relation_id: UUID) -> User:
        from ..resolvers.user import delete_user_relation

        return await delete_user_relation(info, self.id, relation_id)
