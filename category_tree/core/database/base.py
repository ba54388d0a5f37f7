"""Declarative base and column mixins for the category tables.

Example:
    class Category(TimestampedBase):
        __tablename__ = "category"
        name: Mapped[str] = mapped_column(String(255))

    class CategoryPath(Base):
        __tablename__ = "category_tree"
        ancestor: Mapped[int] = mapped_column(primary_key=True)
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime, MetaData, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Deterministic constraint and index names across SQLite and PostgreSQL
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_N_name)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "pk": "pk_%(table_name)s",
}


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Declarative base; every model names its table explicitly."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)


class IntegerPKMixin:
    """Surrogate integer key assigned by the database.

    Generated values start at 1, which leaves 0 free for the implicit root.
    """

    id: Mapped[int] = mapped_column(
        primary_key=True,
        autoincrement=True,
        comment="Generated category id",
    )


class TimestampMixin:
    """created_at / updated_at columns.

    Python-side defaults cover ORM inserts; server defaults cover rows
    written with plain SQL.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        onupdate=_utcnow,
        nullable=False,
    )


class TimestampedBase(Base, IntegerPKMixin, TimestampMixin):
    """Abstract base for tables with an integer id and timestamps."""

    __abstract__ = True


__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "IntegerPKMixin",
    "TimestampMixin",
    "TimestampedBase",
]
