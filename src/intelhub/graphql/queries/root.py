"""
Root GraphQL query definitions
"""

from uuid import UUID

import strawberry

from ..types.capability import Capability
from ..types.common import Connection, OrderingMode
from ..types.role import Role, RolesOrdering
from ..types.user import User, UsersOrdering


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field
    async def me(self, info: strawberry.Info) -> User:
        """Get the current authenticated user."""
        from ..resolvers.user import resolve_current_user

        return await resolve_current_user(info)

    @strawberry.field
    async def user(self, info: strawberry.Info, id: UUID) -> User | None:
        """Get a user by ID."""
        from ..resolvers.user import resolve_user_by_id

        return await resolve_user_by_id(info, id)

    @strawberry.field
    async def users(
        self,
        info: strawberry.Info,
        first: int | None = None,
        after: str | None = None,
        order_by: UsersOrdering | None = None,
        order_mode: OrderingMode | None = None,
        search: str | None = None,
    ) -> Connection[User]:
        """List users."""
        from ..resolvers.user import resolve_users

        return await resolve_users(
            info,
            first,
            after,
            (order_by or UsersOrdering.NAME).value,
            order_mode or OrderingMode.asc,
            search,
        )

    @strawberry.field
    async def role(self, info: strawberry.Info, id: UUID) -> Role | None:
        """Get a role by ID."""
        from ..resolvers.role import resolve_role_by_id

        return await resolve_role_by_id(info, id)

    @strawberry.field
    async def roles(
        self,
        info: strawberry.Info,
        first: int | None = None,
        after: str | None = None,
        order_by: RolesOrdering | None = None,
        order_mode: OrderingMode | None = None,
        search: str | None = None,
    ) -> Connection[Role]:
        """List roles."""
        from ..resolvers.role import resolve_roles

        return await resolve_roles(
            info,
            first,
            after,
            (order_by or RolesOrdering.NAME).value,
            order_mode or OrderingMode.asc,
            search,
        )

    @strawberry.field
    async def capabilities(
        self,
        info: strawberry.Info,
        first: int | None = None,
        after: str | None = None,
    ) -> Connection[Capability]:
        """List capabilities in tree order."""
        from ..resolvers.role import resolve_capabilities

        return await resolve_capabilities(info, first, after)
