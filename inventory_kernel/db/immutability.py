"""
ORM-Level Immutability Enforcement for the stock movement ledger.

===============================================================================
WHY THIS EXISTS
===============================================================================

The stock movement ledger is an audit trail.  Every change to an item's
quantity is explained by exactly one movement row, so a movement that can be
edited or removed afterwards is no audit trail at all.

SQLAlchemy fires mapper events before UPDATE/DELETE statements reach the
database.  The listeners below intercept them for StockMovement and raise:

    session.flush()
         |
         v
    [before_update] --> _check_movement_immutability() --> ImmutabilityViolationError
         |
    [before_delete] --> _check_movement_delete() --------> ImmutabilityViolationError
         |
         v
    SQL sent to database (only if checks pass)

The exception aborts the flush, and the caller's transaction rolls back.

===============================================================================
WHAT IS NOT BLOCKED
===============================================================================

Deleting an Item removes its movements through ON DELETE CASCADE inside the
database.  No ORM delete is issued for the movement rows, so these listeners
never fire for that path.  That cascade is the only sanctioned removal.
"""

from sqlalchemy import event

from inventory_kernel.exceptions import ImmutabilityViolationError
from inventory_kernel.logging_config import get_logger

logger = get_logger("db.immutability")


def _check_movement_immutability(mapper, connection, target):
    """Prevent any updates to StockMovement records."""
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": "StockMovement",
            "entity_id": str(target.id),
            "operation": "UPDATE",
        },
    )
    raise ImmutabilityViolationError(
        entity_type="StockMovement",
        entity_id=str(target.id),
        reason="Stock movements are append-only and cannot be modified",
    )


def _check_movement_delete(mapper, connection, target):
    """Prevent direct deletion of StockMovement records."""
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": "StockMovement",
            "entity_id": str(target.id),
            "operation": "DELETE",
        },
    )
    raise ImmutabilityViolationError(
        entity_type="StockMovement",
        entity_id=str(target.id),
        reason="Stock movements are only removed by deleting their item",
    )


def register_immutability_listeners():
    """
    Register the ledger immutability listeners.

    Safe to call more than once; already-registered listeners are skipped.
    Called by init_engine_from_url().
    """
    from inventory_kernel.models.stock_movement import StockMovement

    for event_name, listener_fn in (
        ("before_update", _check_movement_immutability),
        ("before_delete", _check_movement_delete),
    ):
        if not event.contains(StockMovement, event_name, listener_fn):
            event.listen(StockMovement, event_name, listener_fn)


def _safe_remove_listener(target, event_name, listener_fn):
    """Remove an event listener, ignoring it if not registered."""
    if event.contains(target, event_name, listener_fn):
        event.remove(target, event_name, listener_fn)


def unregister_immutability_listeners():
    """
    Remove the ledger immutability listeners.

    WARNING: Only use this in tests that need to bypass the rule on purpose.
    """
    from inventory_kernel.models.stock_movement import StockMovement

    _safe_remove_listener(StockMovement, "before_update", _check_movement_immutability)
    _safe_remove_listener(StockMovement, "before_delete", _check_movement_delete)
