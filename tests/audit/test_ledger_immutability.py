"""
Stock movement ledger immutability.

Movement rows are append-only: the ORM refuses to update or delete them.
The only removal path is the database cascade when the owning item is
deleted.
"""

import pytest
from sqlalchemy import event

from inventory_kernel.db.immutability import (
    _check_movement_delete,
    _check_movement_immutability,
    register_immutability_listeners,
    unregister_immutability_listeners,
)
from inventory_kernel.domain.dtos import MovementRequest
from inventory_kernel.exceptions import ImmutabilityViolationError
from inventory_kernel.models.stock_movement import MovementType, StockMovement
from inventory_kernel.services import MovementLedger


@pytest.fixture
def movement(session, orchestrator, create_item) -> StockMovement:
    item = create_item(quantity=10)
    record = orchestrator.record_movement(
        MovementRequest(item_id=item.id, type=MovementType.OUT, quantity=3, reason="sale")
    )
    return session.get(StockMovement, record.id)


class TestOrmGuards:
    def test_update_blocked(self, session, movement):
        movement_id = movement.id
        movement.quantity = 99

        with pytest.raises(ImmutabilityViolationError) as exc_info:
            session.flush()

        err = exc_info.value
        assert err.entity_type == "StockMovement"
        assert err.entity_id == str(movement_id)
        assert err.code == "IMMUTABILITY_VIOLATION"
        session.rollback()

    def test_reason_rewrite_blocked(self, session, movement):
        movement.reason = "something else"
        with pytest.raises(ImmutabilityViolationError):
            session.flush()
        session.rollback()

    def test_delete_blocked(self, session, movement):
        session.delete(movement)
        with pytest.raises(ImmutabilityViolationError):
            session.flush()
        session.rollback()

    def test_row_survives_blocked_update(self, session, movement, movement_selector):
        movement_id, item_id = movement.id, movement.item_id
        movement.quantity = 1
        with pytest.raises(ImmutabilityViolationError):
            session.flush()
        session.rollback()

        [entry] = movement_selector.history(item_id)
        assert entry.id == movement_id
        assert entry.quantity == 3
        assert entry.reason == "sale"

    def test_blocked_attempt_is_logged(self, session, movement, captured_logs):
        movement.quantity = 50
        with pytest.raises(ImmutabilityViolationError):
            session.flush()
        session.rollback()

        [event_log] = [
            r for r in captured_logs() if r["message"] == "immutability_violation_blocked"
        ]
        assert event_log["operation"] == "UPDATE"
        assert event_log["level"] == "ERROR"


class TestListenerRegistration:
    def test_registration_is_idempotent(self):
        register_immutability_listeners()
        register_immutability_listeners()
        assert event.contains(StockMovement, "before_update", _check_movement_immutability)
        assert event.contains(StockMovement, "before_delete", _check_movement_delete)

    def test_unregister_then_register(self):
        unregister_immutability_listeners()
        try:
            assert not event.contains(StockMovement, "before_update", _check_movement_immutability)
        finally:
            register_immutability_listeners()
        assert event.contains(StockMovement, "before_update", _check_movement_immutability)


def test_ledger_writer_is_append_only():
    assert hasattr(MovementLedger, "append")
    for name in ("update", "delete", "remove"):
        assert not hasattr(MovementLedger, name)
