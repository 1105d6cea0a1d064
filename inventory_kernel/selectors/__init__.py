"""Selectors for the inventory kernel (read side)."""

from inventory_kernel.selectors.item_selector import ItemSelector
from inventory_kernel.selectors.movement_selector import MovementSelector

__all__ = [
    "ItemSelector",
    "MovementSelector",
]
