"""
Module: inventory_kernel.db.base
Responsibility: Declarative base classes for all SQLAlchemy ORM models.  Provides
    the integer-key + UUID public-id convention, the type annotation map for
    consistent column types, and the TimestampedBase mixin.
Architecture position: Kernel > DB.  This is the lowest-level import target
    within the kernel.  ALL model files import from here.  This module MUST NOT
    import from models/, services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - Integer surrogate keys: every row gets a store-assigned, monotonically
      increasing ``id``.  BIGINT on PostgreSQL, INTEGER on SQLite (the only
      type SQLite auto-increments).
    - Public identifiers: every row gets a uuid4 ``public_id``, unique and
      assigned at creation, for any externally-facing reference.
    - Decimal precision: prices map to Numeric(10, 2).

Failure modes:
    - IntegrityError on a duplicate public_id (protected by UNIQUE).
"""

from datetime import date, datetime
from decimal import Decimal
from typing import ClassVar
from uuid import UUID as PyUUID, uuid4

from sqlalchemy import BigInteger, Date, DateTime, Integer, Numeric, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

# BIGINT everywhere except SQLite, where only INTEGER PRIMARY KEY autoincrements
SurrogateKey = BigInteger().with_variant(Integer(), "sqlite")


class UUIDString(TypeDecorator):
    """
    UUID type stored as String(36) for cross-database portability.

    Transparently converts between Python UUID objects and their 36-character
    string representation.
    """

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value)
        return None

    def process_result_value(self, value, dialect):
        if value is not None:
            return PyUUID(value)
        return None


class Base(DeclarativeBase):
    """
    Declarative base for all SQLAlchemy models.

    Contract:
        Every ORM model inherits from Base (or TimestampedBase).  Base
        provides the integer ``id`` primary key, the ``public_id`` UUID and a
        type_annotation_map that keeps column types consistent.

    Guarantees:
        - id is assigned by the store on INSERT and never changes.
        - public_id is a uuid4 assigned on INSERT, stored as String(36).
        - datetime maps to DateTime(timezone=True).
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(10, 2),
        datetime: DateTime(timezone=True),
        date: Date,
        PyUUID: UUIDString(),
        int: Integer,
    }

    id: Mapped[int] = mapped_column(
        SurrogateKey,
        primary_key=True,
        autoincrement=True,
    )

    public_id: Mapped[PyUUID] = mapped_column(
        UUIDString(),
        nullable=False,
        unique=True,
        default=uuid4,
    )


class TimestampedBase(Base):
    """
    Abstract base with store-managed created/updated timestamps.

    Guarantees:
        - created_at is set to server NOW() on INSERT and never changes.
        - updated_at is set to server NOW() on INSERT and refreshed on every
          UPDATE (via onupdate=func.now()).
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


# Re-export UUID for convenience
UUID = PyUUID
