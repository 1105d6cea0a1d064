"""
Structured logging: the JSON lines the kernel emits for items, movements
and blocked ledger writes, plus LogContext and configure_logging behavior.
"""

import json
import logging
from decimal import Decimal
from io import StringIO
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from inventory_kernel.domain.dtos import ItemPatch, MovementRequest
from inventory_kernel.domain.movement_policy import compute_new_quantity
from inventory_kernel.exceptions import (
    ImmutabilityViolationError,
    InsufficientStockError,
    ItemNotFoundError,
    TransactionFailedError,
)
from inventory_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)
from inventory_kernel.models.stock_movement import MovementType, StockMovement
from inventory_kernel.services import MovementLedger


def _events(logs, message):
    return [r for r in logs if r["message"] == message]


# ---------------------------------------------------------------------------
# Movement events
# ---------------------------------------------------------------------------


class TestMovementEvents:
    def test_one_correlation_id_per_movement(self, orchestrator, create_item, captured_logs):
        item = create_item(quantity=4)

        orchestrator.record_movement(
            MovementRequest(item_id=item.id, type=MovementType.IN, quantity=1)
        )
        orchestrator.record_movement(
            MovementRequest(item_id=item.id, type=MovementType.OUT, quantity=2)
        )

        logs = captured_logs()
        started = _events(logs, "movement_started")
        recorded = _events(logs, "movement_recorded")
        assert len(started) == len(recorded) == 2
        assert started[0]["correlation_id"] != started[1]["correlation_id"]
        assert [r["correlation_id"] for r in recorded] == [
            r["correlation_id"] for r in started
        ]
        # The ledger append runs inside the same bound context
        appended = _events(logs, "ledger_row_appended")
        assert [r["correlation_id"] for r in appended] == [
            r["correlation_id"] for r in started
        ]

    def test_every_line_has_the_base_fields(self, orchestrator, create_item, captured_logs):
        item = create_item(quantity=1)
        orchestrator.record_movement(
            MovementRequest(item_id=item.id, type=MovementType.ADJUSTMENT, quantity=9)
        )

        logs = captured_logs()
        assert logs
        for record in logs:
            assert {"ts", "level", "logger", "message"} <= set(record)
            assert record["logger"].startswith("inventory_kernel.")

        [recorded] = _events(logs, "movement_recorded")
        assert recorded["logger"] == "inventory_kernel.services.movement_orchestrator"
        assert recorded["previous_quantity"] == 1
        assert recorded["new_quantity"] == 9
        assert recorded["duration_ms"] >= 0

    def test_context_is_released_after_movement(self, orchestrator, create_item):
        item = create_item(quantity=1)
        orchestrator.record_movement(
            MovementRequest(item_id=item.id, type=MovementType.IN, quantity=1)
        )
        assert LogContext.get_all() == {}

    def test_context_is_released_after_rejection(self, orchestrator):
        with pytest.raises(ItemNotFoundError):
            orchestrator.record_movement(
                MovementRequest(item_id=424_242, type=MovementType.IN, quantity=1)
            )
        assert LogContext.get_all() == {}

    def test_unknown_item_rejection(self, orchestrator, captured_logs):
        with pytest.raises(ItemNotFoundError):
            orchestrator.record_movement(
                MovementRequest(item_id=424_242, type=MovementType.OUT, quantity=1)
            )

        [rejected] = _events(captured_logs(), "movement_rejected")
        assert rejected["error_code"] == "ITEM_NOT_FOUND"
        assert rejected["item_id"] == "424242"
        assert "traceback" not in rejected

    def test_store_failure_logs_traceback(
        self, orchestrator, create_item, captured_logs, monkeypatch
    ):
        item = create_item(quantity=2)

        def _fail(self, request):
            raise OperationalError("INSERT INTO stock_movements", {}, Exception("disk full"))

        monkeypatch.setattr(MovementLedger, "append", _fail)
        with pytest.raises(TransactionFailedError):
            orchestrator.record_movement(
                MovementRequest(item_id=item.id, type=MovementType.IN, quantity=1)
            )

        [failed] = _events(captured_logs(), "movement_failed")
        assert failed["level"] == "ERROR"
        assert failed["exc_type"] == "OperationalError"
        assert "disk full" in failed["exc_message"]
        assert "Traceback" in failed["traceback"]
        # Only kernel errors carry a code
        assert "exc_code" not in failed


# ---------------------------------------------------------------------------
# Item and ledger-guard events
# ---------------------------------------------------------------------------


class TestItemEvents:
    def test_update_lists_changed_fields(self, item_service, create_item, captured_logs):
        item = create_item(quantity=0, location_id=3)

        item_service.update(item.id, ItemPatch.of(name="Impact driver", location_id=None))

        [updated] = _events(captured_logs(), "item_updated")
        assert updated["item_id"] == item.id
        assert updated["fields"] == ["location_id", "name"]

    def test_delete_events(self, item_service, create_item, captured_logs):
        item = create_item()

        item_service.delete(item.id)
        item_service.delete(item.id)

        messages = [r["message"] for r in captured_logs()]
        assert messages.count("item_deleted") == 1
        assert messages.count("item_delete_missing") == 1

    def test_blocked_ledger_delete(
        self, session, orchestrator, create_item, captured_logs
    ):
        item = create_item(quantity=5)
        record = orchestrator.record_movement(
            MovementRequest(item_id=item.id, type=MovementType.OUT, quantity=1)
        )

        session.delete(session.get(StockMovement, record.id))
        with pytest.raises(ImmutabilityViolationError):
            session.flush()
        session.rollback()

        [blocked] = _events(captured_logs(), "immutability_violation_blocked")
        assert blocked["operation"] == "DELETE"
        assert blocked["entity_type"] == "StockMovement"
        assert blocked["entity_id"] == str(record.id)


# ---------------------------------------------------------------------------
# Formatter
# ---------------------------------------------------------------------------


class TestStructuredFormatter:
    def test_kernel_error_fields(self, captured_logs):
        try:
            compute_new_quantity(
                item_id=5, movement_type=MovementType.OUT, current=3, quantity=8
            )
        except InsufficientStockError:
            get_logger("services.movement_orchestrator").warning(
                "stock_check", exc_info=True
            )

        [record] = _events(captured_logs(), "stock_check")
        assert record["exc_code"] == "INSUFFICIENT_STOCK"
        assert record["exc_item_id"] == 5
        assert record["exc_requested"] == 8
        assert record["exc_available"] == 3

    def test_values_json_cannot_encode(self, captured_logs):
        public_id = uuid4()
        get_logger("services.item").info(
            "price_check",
            extra={"public_id": public_id, "price": Decimal("19.99"), "tags": {"b", "a"}},
        )

        [record] = _events(captured_logs(), "price_check")
        assert record["public_id"] == str(public_id)
        assert record["price"] == "19.99"
        assert record["tags"] == ["a", "b"]

    def test_bound_context_beats_extra(self):
        formatter = StructuredFormatter()
        record = logging.LogRecord(
            "inventory_kernel.test", logging.INFO, __file__, 1, "clash", (), None
        )
        record.item_id = 99

        with LogContext.bind(item_id="7"):
            payload = json.loads(formatter.format(record))

        assert payload["item_id"] == "7"


# ---------------------------------------------------------------------------
# LogContext
# ---------------------------------------------------------------------------


class TestLogContext:
    def test_bind_nests_and_restores(self):
        with LogContext.bind(correlation_id="outer", item_id="1"):
            with LogContext.bind(item_id="2"):
                assert LogContext.get_all() == {"correlation_id": "outer", "item_id": "2"}
            assert LogContext.get_all() == {"correlation_id": "outer", "item_id": "1"}
        assert LogContext.get_all() == {}

    def test_bind_restores_on_error(self):
        with pytest.raises(RuntimeError):
            with LogContext.bind(correlation_id="c-1"):
                raise RuntimeError("boom")
        assert LogContext.get_all() == {}

    def test_set_skips_none(self):
        LogContext.set(correlation_id="c-1")
        LogContext.set(correlation_id=None, item_id="3")
        assert LogContext.get_all() == {"correlation_id": "c-1", "item_id": "3"}

    def test_unknown_field_rejected(self):
        with pytest.raises(TypeError):
            LogContext.set(actor_id="someone")
        with pytest.raises(TypeError):
            with LogContext.bind(correlation_id="c-1", movement_id="m-1"):
                pass
        assert LogContext.get_all() == {}


# ---------------------------------------------------------------------------
# configure_logging / reset_logging
# ---------------------------------------------------------------------------


@pytest.fixture
def fresh_logging():
    """Start unconfigured; restore the suite's DEBUG configuration afterwards."""
    reset_logging()
    yield logging.getLogger("inventory_kernel")
    reset_logging()
    configure_logging(level=logging.DEBUG)


class TestConfigureLogging:
    def test_second_call_is_ignored(self, fresh_logging):
        first = logging.StreamHandler(StringIO())
        configure_logging(handler=first, level=logging.INFO)
        handlers_before = list(fresh_logging.handlers)

        configure_logging(handler=logging.StreamHandler(StringIO()), level=logging.DEBUG)

        assert fresh_logging.handlers == handlers_before
        assert first in fresh_logging.handlers
        assert fresh_logging.level == logging.INFO

    def test_level_filters_output(self, fresh_logging):
        stream = StringIO()
        configure_logging(stream=stream, level=logging.WARNING)

        get_logger("services.item").info("item_created")
        get_logger("db.immutability").error("immutability_violation_blocked")

        lines = [json.loads(line) for line in stream.getvalue().splitlines()]
        assert [r["message"] for r in lines] == ["immutability_violation_blocked"]
        assert lines[0]["logger"] == "inventory_kernel.db.immutability"

    def test_reset_keeps_foreign_handlers(self, fresh_logging):
        foreign = logging.NullHandler()
        fresh_logging.addHandler(foreign)
        try:
            configure_logging(stream=StringIO())
            reset_logging()
            assert fresh_logging.handlers.count(foreign) == 1
            assert not any(
                isinstance(h.formatter, StructuredFormatter) for h in fresh_logging.handlers
            )
        finally:
            fresh_logging.removeHandler(foreign)
