"""
Shared pytest fixtures and configuration for all tests.
"""

import os
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
import strawberry
from fastapi import Response

from intelhub.auth.adapters.base import Principal
from intelhub.auth.context import ANONYMOUS, AuthContext


@pytest.fixture
def database_url(tmp_path) -> str:
    """A throwaway sqlite database per test."""
    return f"sqlite+aiosqlite:///{tmp_path / 'intelhub.db'}"


@pytest_asyncio.fixture
async def database(database_url: str):
    """Point the shared connection pool at a fresh database with all tables."""
    from intelhub.database.connection import (
        dispose_database,
        get_async_engine,
        init_database,
        reset_database,
    )
    from intelhub.dbmodels import Base

    reset_database()
    init_database(database_url, force_reinit=True)
    async with get_async_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield database_url

    await dispose_database()


@pytest_asyncio.fixture
async def seeded_platform(database: str) -> str:
    """Capability tree plus the built-in roles, without an administrator."""
    from intelhub.database.connection import get_async_session
    from intelhub.database.seed_data import seed_platform

    async with get_async_session() as db:
        await seed_platform(db, with_admin=False)
    return database


@pytest_asyncio.fixture
async def admin_user(seeded_platform: str):
    from intelhub.database.connection import get_async_session
    from intelhub.database.seed_data import ADMINISTRATOR_ROLE
    from intelhub.domain.users import add_user

    async with get_async_session() as db:
        return await add_user(
            db,
            name="admin",
            email="admin@intelhub.io",
            password="admin-password",
            roles=[ADMINISTRATOR_ROLE],
        )


@pytest_asyncio.fixture
async def analyst_user(seeded_platform: str):
    """A user holding only the default role."""
    from intelhub.database.connection import get_async_session
    from intelhub.domain.users import add_user

    async with get_async_session() as db:
        return await add_user(
            db, name="analyst", email="analyst@intelhub.io", password="analyst-password"
        )


@pytest.fixture
def auth_context_factory() -> Callable[..., AuthContext]:
    """Build an authenticated context; no user id gives the anonymous one."""

    def build(user_id=None, capabilities=(), email: str | None = None) -> AuthContext:
        if user_id is None:
            return ANONYMOUS
        return AuthContext(
            user_id=user_id,
            principal=Principal(provider="api_token", subject=str(user_id)),
            token="test-token",
            user_name=email,
            capabilities=frozenset(capabilities),
        )

    return build


@pytest.fixture
def info_factory() -> Callable[..., Any]:
    """Build a GraphQL info object carrying the given auth context."""

    def build(auth_context: AuthContext | None = None) -> Any:
        info = MagicMock(spec=strawberry.Info)
        info.context = {
            "request": MagicMock(),
            "response": Response(),
            "auth": auth_context or ANONYMOUS,
        }
        return info

    return build


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
