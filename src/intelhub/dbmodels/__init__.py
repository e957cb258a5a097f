"""
Database models for IntelHub (authoritative ORM definitions).

This module defines the SQLAlchemy Base with a naming convention for stable
Alembic autogenerate diffs, and exposes `target_metadata` for Alembic.

Edges between users, groups, roles and capabilities are stored as typed rows
in `relations` rather than per-pair association tables, so every edge has its
own id that the API can address (see `relationDelete`).
"""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Naming convention for deterministic constraint/index names in Alembic diffs
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

JSONType = JSON().with_variant(JSONB(), "postgresql")

RELATION_MEMBERSHIP = "membership"
RELATION_USER_ROLE = "user_role"
RELATION_ROLE_CAPABILITY = "role_capability"


def utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


class Users(Base):
    __tablename__ = "users"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="users_pkey"),
        UniqueConstraint("email", name="users_email_key"),
        UniqueConstraint("api_token", name="users_api_token_key"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    firstname: Mapped[str | None] = mapped_column(String(255))
    lastname: Mapped[str | None] = mapped_column(String(255))
    description: Mapped[str | None] = mapped_column(Text)
    language: Mapped[str] = mapped_column(String(16), default="auto")
    password_hash: Mapped[str | None] = mapped_column(String(255))
    api_token: Mapped[UUID] = mapped_column(Uuid, nullable=False, default=uuid4)
    external: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )


class Roles(Base):
    __tablename__ = "roles"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="roles_pkey"),
        UniqueConstraint("name", name="roles_name_key"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    default_assignation: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )


class Capabilities(Base):
    __tablename__ = "capabilities"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="capabilities_pkey"),
        UniqueConstraint("name", name="capabilities_name_key"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    ordering: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), default=utcnow, server_default=func.now()
    )


class Groups(Base):
    __tablename__ = "groups"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="groups_pkey"),
        UniqueConstraint("name", name="groups_name_key"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )


class Relations(Base):
    __tablename__ = "relations"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="relations_pkey"),
        UniqueConstraint(
            "relationship_type",
            "from_id",
            "to_id",
            name="relations_relationship_type_from_id_to_id_key",
        ),
        Index("idx_relations_from", "from_id", "relationship_type"),
        Index("idx_relations_to", "to_id", "relationship_type"),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    relationship_type: Mapped[str] = mapped_column(String(50), nullable=False)
    from_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    to_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(True), default=utcnow, server_default=func.now()
    )


class ViewParameters(Base):
    __tablename__ = "view_parameters"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="view_parameters_pkey"),
        UniqueConstraint(
            "user_id", "storage_key", name="view_parameters_user_id_storage_key_key"
        ),
    )

    id: Mapped[UUID] = mapped_column(Uuid, default=uuid4)
    user_id: Mapped[UUID] = mapped_column(Uuid, nullable=False)
    storage_key: Mapped[str] = mapped_column(String(255), nullable=False)
    params: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(True), default=utcnow, onupdate=utcnow, server_default=func.now()
    )


target_metadata = Base.metadata
