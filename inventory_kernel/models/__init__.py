"""Domain models for the inventory kernel."""

from inventory_kernel.models.item import Item
from inventory_kernel.models.stock_movement import MovementType, StockMovement

__all__ = [
    "Item",
    "MovementType",
    "StockMovement",
]
