"""
Reusable seed data functions for database initialization.

Seeds the capability tree, the built-in roles and the bootstrap
administrator. Every function is idempotent so `intelhub seed` can run on
each deployment.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..config import settings
from ..dbmodels import RELATION_USER_ROLE, Capabilities, Roles, Users
from ..domain.grants import add_role, find_capability_by_name, find_role_by_name
from ..domain.relations import add_relation, targets_of
from ..domain.users import add_user, find_user_by_email
from ..logging import get_logger

logger = get_logger(__name__)

ADMINISTRATOR_ROLE = "Administrator"
DEFAULT_ROLE = "Default"

# (name, description, ordering); children are prefixed with their parent's name
CAPABILITIES = [
    ("BYPASS", "Bypass all capabilities", 1),
    ("KNOWLEDGE", "Access knowledge", 100),
    ("KNOWLEDGE_KNUPDATE", "Create / Update knowledge", 200),
    ("KNOWLEDGE_KNUPDATE_KNDELETE", "Delete knowledge", 300),
    ("KNOWLEDGE_KNUPLOAD", "Upload knowledge files", 400),
    ("KNOWLEDGE_KNASKIMPORT", "Import knowledge", 500),
    ("KNOWLEDGE_KNGETEXPORT", "Download knowledge export", 600),
    ("KNOWLEDGE_KNGETEXPORT_KNASKEXPORT", "Generate knowledge export", 700),
    ("KNOWLEDGE_KNENRICHMENT", "Ask for knowledge enrichment", 800),
    ("EXPLORE", "Access exploration", 1000),
    ("EXPLORE_EXUPDATE", "Create / Update exploration", 1100),
    ("EXPLORE_EXUPDATE_EXDELETE", "Delete exploration", 1200),
    ("MODULES", "Access connectors", 2000),
    ("MODULES_MODMANAGE", "Manage connector state", 2100),
    ("SETTINGS", "Access administration", 3000),
    ("SETTINGS_SETACCESSES", "Manage credentials", 3100),
    ("SETTINGS_SETMARKINGS", "Manage marking definitions", 3200),
    ("SETTINGS_SETINFERENCES", "Manage inference rules", 3300),
]

DEFAULT_ROLE_CAPABILITIES = ["KNOWLEDGE", "EXPLORE"]


async def ensure_capabilities(db: AsyncSession) -> int:
    """Create missing capabilities; returns how many were created."""
    created = 0
    for name, description, ordering in CAPABILITIES:
        if await find_capability_by_name(db, name) is not None:
            continue
        db.add(Capabilities(name=name, description=description, ordering=ordering))
        created += 1
    await db.flush()
    logger.info("Capabilities seeded", created=created, total=len(CAPABILITIES))
    return created


async def ensure_role(
    db: AsyncSession,
    *,
    name: str,
    description: str,
    capabilities: list[str],
    default_assignation: bool = False,
) -> Roles:
    existing = await find_role_by_name(db, name)
    if existing is not None:
        logger.debug("Role already exists", role_id=str(existing.id), name=name)
        return existing
    return await add_role(
        db,
        name=name,
        description=description,
        default_assignation=default_assignation,
        capabilities=capabilities,
    )


async def ensure_admin_user(
    db: AsyncSession,
    *,
    email: str | None = None,
    password: str | None = None,
    api_token: UUID | None = None,
) -> Users:
    """
    Ensure the bootstrap administrator exists and holds the Administrator role.

    Raises:
        ValueError: If the administrator must be created and no password is set
    """
    email = email or settings.admin_email
    admin = await find_user_by_email(db, email)
    if admin is None:
        password = password or settings.admin_password
        if not password:
            raise ValueError("INTELHUB_ADMIN_PASSWORD is required to create the administrator")
        if api_token is None and settings.admin_token:
            api_token = UUID(settings.admin_token)
        admin = await add_user(
            db,
            name="admin",
            email=email,
            password=password,
            firstname="Admin",
            lastname="IntelHub",
            roles=[ADMINISTRATOR_ROLE],
            api_token=api_token,
        )
        logger.info("Administrator created", user_id=str(admin.id), email=email)
        return admin

    role = await find_role_by_name(db, ADMINISTRATOR_ROLE)
    if role is not None and role.id not in await targets_of(db, admin.id, RELATION_USER_ROLE):
        await add_relation(db, admin.id, role.id, RELATION_USER_ROLE)
        logger.info("Administrator role restored", user_id=str(admin.id))
    return admin


async def seed_platform(db: AsyncSession, *, with_admin: bool = True) -> Users | None:
    """Seed capabilities, built-in roles and (optionally) the administrator."""
    await ensure_capabilities(db)
    await ensure_role(
        db,
        name=ADMINISTRATOR_ROLE,
        description="Full platform access",
        capabilities=["BYPASS"],
    )
    await ensure_role(
        db,
        name=DEFAULT_ROLE,
        description="Granted to every new user",
        capabilities=DEFAULT_ROLE_CAPABILITIES,
        default_assignation=True,
    )
    admin = await ensure_admin_user(db) if with_admin else None
    logger.info("Platform seeded", with_admin=with_admin)
    return admin
