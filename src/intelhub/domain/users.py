"""Users, persons and their grants."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID, uuid4

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.passwords import hash_password
from ..dbmodels import (
    RELATION_MEMBERSHIP,
    RELATION_ROLE_CAPABILITY,
    RELATION_USER_ROLE,
    Capabilities,
    Relations,
    Roles,
    Users,
    ViewParameters,
)
from ..errors import AlreadyExistsError, FunctionalError, MissingReferenceError
from ..logging import get_logger
from .fields import apply_edit, required, single_value
from .grants import find_role_by_name
from .pagination import OrderMode, Page, paginate
from .relations import add_relation, delete_all_relations, delete_relation, delete_relation_to_named

logger = get_logger(__name__)

USER_ORDERING_COLUMNS = {
    "name": Users.name,
    "email": Users.email,
    "firstname": Users.firstname,
    "lastname": Users.lastname,
    "created_at": Users.created_at,
}


USER_EDITABLE_FIELDS = {
    "name": required("name"),
    "email": required("email"),
    "firstname": single_value,
    "lastname": single_value,
    "description": single_value,
    "language": lambda value: single_value(value) or "auto",
}

USER_ALLOWED_RELATIONS = {RELATION_MEMBERSHIP, RELATION_USER_ROLE}


async def find_user_by_id(db: AsyncSession, user_id: UUID) -> Users | None:
    return await db.get(Users, user_id)


async def get_user_or_fail(db: AsyncSession, user_id: UUID) -> Users:
    user = await db.get(Users, user_id)
    if user is None:
        raise MissingReferenceError("User not found", id=str(user_id))
    return user


async def find_user_by_email(db: AsyncSession, email: str) -> Users | None:
    result = await db.execute(select(Users).where(Users.email == email))
    return result.scalar_one_or_none()


async def find_user_by_token(db: AsyncSession, api_token: UUID) -> Users | None:
    result = await db.execute(select(Users).where(Users.api_token == api_token))
    return result.scalar_one_or_none()


async def find_users(
    db: AsyncSession,
    *,
    first: int | None = None,
    after: str | None = None,
    order_by: str = "name",
    order_mode: OrderMode = OrderMode.ASC,
    search: str | None = None,
) -> Page[Users]:
    column = USER_ORDERING_COLUMNS.get(order_by)
    if column is None:
        raise FunctionalError(f"Unsupported user ordering: {order_by}")

    stmt = select(Users)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(
                Users.name.ilike(pattern),
                Users.email.ilike(pattern),
                Users.firstname.ilike(pattern),
                Users.lastname.ilike(pattern),
            )
        )
    stmt = stmt.order_by(column.desc() if order_mode == OrderMode.DESC else column.asc(), Users.id)
    return await paginate(db, stmt, first=first, after=after)


async def get_roles(db: AsyncSession, user_id: UUID) -> list[Roles]:
    stmt = (
        select(Roles)
        .join(Relations, Relations.to_id == Roles.id)
        .where(
            and_(
                Relations.relationship_type == RELATION_USER_ROLE,
                Relations.from_id == user_id,
            )
        )
        .order_by(Roles.name.asc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_capabilities(db: AsyncSession, user_id: UUID) -> list[Capabilities]:
    """Distinct union of the capabilities granted by all of the user's roles."""
    user_roles = select(Relations.to_id).where(
        and_(
            Relations.relationship_type == RELATION_USER_ROLE,
            Relations.from_id == user_id,
        )
    )
    capability_ids = select(Relations.to_id).where(
        and_(
            Relations.relationship_type == RELATION_ROLE_CAPABILITY,
            Relations.from_id.in_(user_roles),
        )
    )
    stmt = (
        select(Capabilities)
        .where(Capabilities.id.in_(capability_ids))
        .order_by(Capabilities.ordering.asc(), Capabilities.name.asc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def _ensure_email_available(db: AsyncSession, email: str, user_id: UUID | None = None):
    existing = await find_user_by_email(db, email)
    if existing is not None and existing.id != user_id:
        raise AlreadyExistsError("User already exists", email=email)


async def add_user(
    db: AsyncSession,
    *,
    name: str,
    email: str,
    password: str,
    firstname: str | None = None,
    lastname: str | None = None,
    description: str | None = None,
    language: str | None = None,
    roles: Sequence[str] = (),
    api_token: UUID | None = None,
) -> Users:
    """Create a user able to log in.

    The user receives every role flagged `default_assignation` plus the roles
    named in `roles`.
    """
    if not password:
        raise FunctionalError("Password is required to create a user")
    await _ensure_email_available(db, email)

    user = Users(
        name=name,
        email=email,
        firstname=firstname,
        lastname=lastname,
        description=description,
        language=language or "auto",
        password_hash=hash_password(password),
        api_token=api_token or uuid4(),
        external=False,
    )
    db.add(user)
    await db.flush()

    default_roles = (
        await db.execute(select(Roles).where(Roles.default_assignation.is_(True)))
    ).scalars().all()
    role_ids = {role.id for role in default_roles}
    for role_name in roles:
        role = await find_role_by_name(db, role_name)
        if role is None:
            raise MissingReferenceError("Role not found", name=role_name)
        role_ids.add(role.id)
    for role_id in role_ids:
        await add_relation(db, user.id, role_id, RELATION_USER_ROLE)

    logger.info("User created", user_id=str(user.id), email=email, roles=len(role_ids))
    return user


async def add_person(
    db: AsyncSession,
    *,
    name: str,
    email: str | None = None,
    firstname: str | None = None,
    lastname: str | None = None,
    description: str | None = None,
) -> Users:
    """Create an external person: a user without credentials or roles."""
    if email is None:
        email = f"{uuid4()}@person.intelhub"
    await _ensure_email_available(db, email)

    person = Users(
        name=name,
        email=email,
        firstname=firstname,
        lastname=lastname,
        description=description,
        password_hash=None,
        api_token=uuid4(),
        external=True,
    )
    db.add(person)
    await db.flush()
    logger.info("Person created", user_id=str(person.id))
    return person


async def user_edit_field(db: AsyncSession, user_id: UUID, key: str, value: list[str]) -> Users:
    user = await get_user_or_fail(db, user_id)
    if key == "password":
        password = single_value(value)
        if not password:
            raise FunctionalError("Password cannot be empty", key=key)
        user.password_hash = hash_password(password)
    else:
        if key == "email":
            await _ensure_email_available(db, single_value(value) or "", user.id)
        apply_edit(user, USER_EDITABLE_FIELDS, key, value)
    await db.flush()
    logger.info("User field updated", user_id=str(user_id), key=key)
    return user


async def me_edit_field(db: AsyncSession, user_id: UUID, key: str, value: list[str]) -> Users:
    return await user_edit_field(db, user_id, key, value)


async def user_delete(db: AsyncSession, user_id: UUID) -> UUID:
    user = await get_user_or_fail(db, user_id)
    await delete_all_relations(db, user.id)
    stored_views = await db.execute(select(ViewParameters).where(ViewParameters.user_id == user.id))
    for view in stored_views.scalars().all():
        await db.delete(view)
    await db.delete(user)
    await db.flush()
    logger.info("User deleted", user_id=str(user_id))
    return user_id


async def user_renew_token(db: AsyncSession, user_id: UUID) -> Users:
    """Issue a new API token; sessions bound to the previous one stop validating."""
    user = await get_user_or_fail(db, user_id)
    user.api_token = uuid4()
    await db.flush()
    logger.info("User token renewed", user_id=str(user_id))
    return user


async def remove_role(db: AsyncSession, user_id: UUID, role_name: str) -> Users:
    user = await get_user_or_fail(db, user_id)
    role = await find_role_by_name(db, role_name)
    await delete_relation_to_named(db, user.id, RELATION_USER_ROLE, role.id if role else None)
    return user


async def user_add_relation(
    db: AsyncSession, user_id: UUID, to_id: UUID, through: str
) -> Relations:
    if through not in USER_ALLOWED_RELATIONS:
        raise FunctionalError(f"Cannot add relation {through} to a user")
    return await add_relation(db, user_id, to_id, through)


async def user_delete_relation(db: AsyncSession, user_id: UUID, relation_id: UUID) -> Users:
    user = await get_user_or_fail(db, user_id)
    await delete_relation(db, user.id, relation_id)
    return user
