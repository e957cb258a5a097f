"""
Root GraphQL mutation definitions
"""

from uuid import UUID

import strawberry

from ..types.common import EditInput
from ..types.role import Role, RoleAddInput, RoleEditMutations
from ..types.user import (
    PersonAddInput,
    User,
    UserAddInput,
    UserEditMutations,
    UserLoginInput,
)


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    # Session mutations
    @strawberry.mutation
    async def token(self, info: strawberry.Info, input: UserLoginInput) -> str:
        """Log in with email and password; returns the user's API token."""
        from ..resolvers.auth import login

        return await login(info, input)

    @strawberry.mutation
    async def logout(self, info: strawberry.Info) -> UUID:
        """Clear the session cookie."""
        from ..resolvers.auth import logout

        return await logout(info)

    # Role mutations
    @strawberry.mutation
    def role_edit(self, id: UUID) -> RoleEditMutations:
        return RoleEditMutations(id=id)

    @strawberry.mutation
    async def role_add(self, info: strawberry.Info, input: RoleAddInput) -> Role:
        from ..resolvers.role import add_role

        return await add_role(info, input)

    # User mutations
    @strawberry.mutation
    def user_edit(self, id: UUID) -> UserEditMutations:
        return UserEditMutations(id=id)

    @strawberry.mutation
    async def me_edit(self, info: strawberry.Info, input: EditInput) -> User:
        """Patch one attribute of the current user."""
        from ..resolvers.user import edit_me

        return await edit_me(info, input)

    @strawberry.mutation
    async def person_add(self, info: strawberry.Info, input: PersonAddInput) -> User:
        """Create an external person (no credentials)."""
        from ..resolvers.user import add_person

        return await add_person(info, input)

    @strawberry.mutation
    async def user_add(self, info: strawberry.Info, input: UserAddInput) -> User:
        from ..resolvers.user import add_user

        return await add_user(info, input)
