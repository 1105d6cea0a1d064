"""
Movement Orchestrator - Records one stock movement as an atomic unit.

The Orchestrator ties together:
- ItemService: row-locked read and quantity write
- movement_policy: pure availability check and new-quantity computation
- MovementLedger: append of the audit row
- MovementSelector: ledger history reads

Transaction boundary:
    begin -> lock item row -> validate -> compute -> write quantity
    -> append ledger row -> commit

Any failure at any step rolls back before the error leaves this class, so
callers never see a quantity change without its ledger row (or the
reverse).  NotFound and InsufficientStock propagate as their own types;
every other failure is raised as TransactionFailedError, chained to the
original exception, and is safe to retry.
"""

import time
from uuid import uuid4

from sqlalchemy.orm import Session

from inventory_kernel.domain.clock import Clock, SystemClock
from inventory_kernel.domain.dtos import MovementRequest, StockMovementRecord
from inventory_kernel.domain.movement_policy import (
    QuantityChange,
    compute_new_quantity,
)
from inventory_kernel.exceptions import (
    InventoryKernelError,
    ItemNotFoundError,
    TransactionFailedError,
)
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_kernel.selectors.movement_selector import MovementSelector
from inventory_kernel.services.item_service import ItemService
from inventory_kernel.services.movement_ledger import MovementLedger

logger = get_logger("services.movement_orchestrator")


class MovementOrchestrator:
    """
    Orchestrates the stock movement transaction.

    By default, record_movement() commits on success and rolls back on
    failure.  With auto_commit=False the movement runs inside a SAVEPOINT:
    a failure undoes only this movement, and the caller commits the outer
    transaction.

    Each concurrent unit of work must use its own session.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        auto_commit: bool = True,
    ):
        """
        Initialize the Movement Orchestrator.

        Args:
            session: SQLAlchemy session; the transactional context shared by
                the item store and the ledger.
            clock: Clock for ledger timestamps. Defaults to SystemClock.
            auto_commit: If True (default), commits on success, rolls back on
                failure. If False, runs in a savepoint and leaves the outer
                transaction to the caller.
        """
        self._session = session
        self._clock = clock or SystemClock()
        self._auto_commit = auto_commit

        self._items = ItemService(session)
        self._ledger = MovementLedger(session, self._clock)
        self._history = MovementSelector(session)

    def record_movement(self, request: MovementRequest) -> StockMovementRecord:
        """
        Record a stock movement and apply it to the item's quantity.

        Preconditions (checked inside the transaction):
            - The item exists.
            - For OUT/TRANSFER, the item's quantity >= request.quantity.

        Postconditions (on success):
            - Item quantity is updated per the movement policy and exactly
              one new ledger row exists; both are committed together.
            - Returns the new ledger row.

        Raises:
            ItemNotFoundError: Item does not exist. Nothing written.
            InsufficientStockError: Not enough stock. Nothing written.
            TransactionFailedError: Store failure. Everything rolled back.
        """
        correlation_id = str(uuid4())
        with LogContext.bind(
            correlation_id=correlation_id,
            item_id=str(request.item_id),
        ):
            logger.info(
                "movement_started",
                extra={
                    "movement_type": request.type.value,
                    "quantity": request.quantity,
                },
            )
            t0 = time.monotonic()
            try:
                if self._auto_commit:
                    record, change = self._do_record_movement(request)
                    self._session.commit()
                else:
                    with self._session.begin_nested():
                        record, change = self._do_record_movement(request)

            except InventoryKernelError as exc:
                self._rollback()
                logger.warning(
                    "movement_rejected",
                    extra={
                        "error_code": exc.code,
                        "duration_ms": round((time.monotonic() - t0) * 1000, 2),
                    },
                )
                raise

            except Exception as exc:
                self._rollback()
                logger.error(
                    "movement_failed",
                    extra={"duration_ms": round((time.monotonic() - t0) * 1000, 2)},
                    exc_info=True,
                )
                raise TransactionFailedError(
                    operation="record_movement",
                    cause=f"{type(exc).__name__}: {exc}",
                ) from exc

            logger.info(
                "movement_recorded",
                extra={
                    "movement_id": record.id,
                    "previous_quantity": change.previous,
                    "new_quantity": change.new,
                    "duration_ms": round((time.monotonic() - t0) * 1000, 2),
                },
            )
            return record

    def get_history(self, item_id: int) -> list[StockMovementRecord]:
        """Movements for an item, most recent first; empty if none."""
        return self._history.history(item_id)

    def _rollback(self) -> None:
        # A failed savepoint has already been rolled back by begin_nested()
        if self._auto_commit:
            self._session.rollback()
            logger.debug("transaction_rolled_back")

    def _do_record_movement(
        self, request: MovementRequest
    ) -> tuple[StockMovementRecord, QuantityChange]:
        """Internal movement logic (without transaction management)."""
        # 1. Lock and read the item row
        item = self._items.lock_for_update(request.item_id)
        if item is None:
            raise ItemNotFoundError(request.item_id)

        # 2-3. Validate availability and compute the new quantity (pure)
        change = compute_new_quantity(
            item_id=item.id,
            movement_type=request.type,
            current=item.quantity,
            quantity=request.quantity,
        )

        # 4. Write the new quantity
        if change.delta != 0:
            if not self._items.update_quantity(item.id, change.new):
                raise ItemNotFoundError(request.item_id)

        # 5. Append the ledger row
        record = self._ledger.append(request)

        return record, change
