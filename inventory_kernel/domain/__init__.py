"""Domain layer - request/record DTOs, clock, and the movement policy."""

from inventory_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from inventory_kernel.domain.dtos import (
    EDITABLE_ITEM_FIELDS,
    ItemCreate,
    ItemPatch,
    ItemRecord,
    MovementRequest,
    StockMovementRecord,
)
from inventory_kernel.domain.movement_policy import (
    STOCK_CONSUMING_TYPES,
    QuantityChange,
    check_availability,
    compute_new_quantity,
)

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "EDITABLE_ITEM_FIELDS",
    "ItemCreate",
    "ItemPatch",
    "ItemRecord",
    "MovementRequest",
    "StockMovementRecord",
    "STOCK_CONSUMING_TYPES",
    "QuantityChange",
    "check_availability",
    "compute_new_quantity",
]
