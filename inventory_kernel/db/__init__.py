"""Database layer - engine, base classes, and ledger immutability."""

from inventory_kernel.db.base import UUID, Base, SurrogateKey, TimestampedBase, UUIDString
from inventory_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    get_session_factory,
    init_engine_from_url,
    session_scope,
)

__all__ = [
    "get_engine",
    "get_session",
    "get_session_factory",
    "init_engine_from_url",
    "session_scope",
    "create_tables",
    "Base",
    "TimestampedBase",
    "SurrogateKey",
    "UUIDString",
    "UUID",
]
