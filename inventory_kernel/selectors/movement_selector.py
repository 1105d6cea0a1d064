"""
Module: inventory_kernel.selectors.movement_selector
Responsibility: Read-only access to the stock movement ledger.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - History is ordered most recent first: created_at DESC, then id DESC
      so rows stamped with the same time keep insertion order.
    - Item existence is not checked; an unknown item has an empty history.
"""

from uuid import UUID

from sqlalchemy import func, select

from inventory_kernel.domain.dtos import StockMovementRecord
from inventory_kernel.models.stock_movement import StockMovement
from inventory_kernel.selectors.base import BaseSelector


class MovementSelector(BaseSelector[StockMovement]):
    """Selector for stock movement history."""

    def history(self, item_id: int) -> list[StockMovementRecord]:
        """All movements for an item, most recent first."""
        movements = self.session.execute(
            select(StockMovement)
            .where(StockMovement.item_id == item_id)
            .order_by(StockMovement.created_at.desc(), StockMovement.id.desc())
            .execution_options(populate_existing=True)
        ).scalars().all()
        return [StockMovementRecord.from_model(m) for m in movements]

    def get_by_public_id(self, public_id: UUID) -> StockMovementRecord | None:
        movement = self.session.execute(
            select(StockMovement)
            .where(StockMovement.public_id == public_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        return StockMovementRecord.from_model(movement) if movement else None

    def count_for_item(self, item_id: int) -> int:
        return self.session.execute(
            select(func.count())
            .select_from(StockMovement)
            .where(StockMovement.item_id == item_id)
        ).scalar_one()
