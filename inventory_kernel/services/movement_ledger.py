"""
MovementLedger -- write side of the stock movement ledger.

Responsibility:
    Appends one immutable StockMovement row inside the caller's
    transaction.  There is no update or delete method: the ledger is
    append-only.

Architecture position:
    Kernel > Services.  Called only by MovementOrchestrator.

Invariants enforced:
    - created_at comes from the injected Clock, so ledger order is the
      order movements were recorded.
    - The row becomes visible to other sessions only when the caller's
      transaction commits, together with the item quantity change.
"""

from sqlalchemy.orm import Session

from inventory_kernel.domain.clock import Clock, SystemClock
from inventory_kernel.domain.dtos import MovementRequest, StockMovementRecord
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.stock_movement import StockMovement
from inventory_kernel.services.base import BaseService

logger = get_logger("services.movement_ledger")


class MovementLedger(BaseService[StockMovement]):
    """Append-only writer for stock movements."""

    def __init__(self, session: Session, clock: Clock | None = None):
        super().__init__(session)
        self._clock = clock or SystemClock()

    def append(self, request: MovementRequest) -> StockMovementRecord:
        """
        Insert a movement row and return it with its assigned identifiers.

        Postconditions:
            - ``id`` and ``public_id`` are assigned (flushed, not committed).
        """
        movement = StockMovement(
            item_id=request.item_id,
            type=request.type,
            quantity=request.quantity,
            location_id_from=request.location_id_from,
            location_id_to=request.location_id_to,
            reason=request.reason,
            created_at=self._clock.now(),
        )
        self.session.add(movement)
        self.session.flush()

        logger.debug(
            "ledger_row_appended",
            extra={
                "movement_id": movement.id,
                "item_id": movement.item_id,
                "movement_type": movement.type.value,
                "quantity": movement.quantity,
            },
        )
        return StockMovementRecord.from_model(movement)
