"""
Movement policy -- how a stock movement changes an item's on-hand quantity.

Responsibility:
    Pure decision function used by MovementOrchestrator between reading the
    locked item row and writing the new quantity.  No I/O, no session.

Policy:
    IN          current + quantity
    OUT         current - quantity      (requires current >= quantity)
    ADJUSTMENT  quantity                (a stock count: sets on-hand to the
                                         counted value)
    TRANSFER    current                 (requires current >= quantity; a
                                         transfer relocates stock without
                                         changing the global count)

    ADJUSTMENT and TRANSFER are policy decisions, pinned by tests.  The
    model tracks a single scalar quantity per item, so a transfer has no
    per-location balance to move between.

Invariants enforced:
    - The returned quantity is never negative.
"""

from dataclasses import dataclass

from inventory_kernel.exceptions import InsufficientStockError
from inventory_kernel.models.stock_movement import MovementType

# Movement types that consume on-hand stock and must pass the sufficiency check
STOCK_CONSUMING_TYPES: frozenset[MovementType] = frozenset(
    {MovementType.OUT, MovementType.TRANSFER}
)


@dataclass(frozen=True)
class QuantityChange:
    """Before/after quantity for one movement."""

    previous: int
    new: int

    @property
    def delta(self) -> int:
        return self.new - self.previous


def check_availability(
    item_id: int,
    movement_type: MovementType,
    current: int,
    requested: int,
) -> None:
    """Raise InsufficientStockError if an OUT/TRANSFER exceeds on-hand stock."""
    if movement_type in STOCK_CONSUMING_TYPES and current < requested:
        raise InsufficientStockError(
            item_id=item_id,
            requested=requested,
            available=current,
        )


def compute_new_quantity(
    item_id: int,
    movement_type: MovementType,
    current: int,
    quantity: int,
) -> QuantityChange:
    """
    Apply the movement policy to the current on-hand quantity.

    Preconditions:
        - ``current`` >= 0 (the stored invariant).
        - ``quantity`` > 0 (checked by MovementRequest).

    Raises:
        InsufficientStockError: OUT/TRANSFER larger than ``current``.
    """
    check_availability(item_id, movement_type, current, quantity)

    if movement_type == MovementType.IN:
        new = current + quantity
    elif movement_type == MovementType.OUT:
        new = current - quantity
    elif movement_type == MovementType.ADJUSTMENT:
        new = quantity
    elif movement_type == MovementType.TRANSFER:
        new = current
    else:
        raise ValueError(f"Unhandled movement type: {movement_type!r}")

    if new < 0:
        raise InsufficientStockError(
            item_id=item_id,
            requested=quantity,
            available=current,
        )

    return QuantityChange(previous=current, new=new)
