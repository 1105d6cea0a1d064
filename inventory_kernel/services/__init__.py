"""Services for the inventory kernel (write side)."""

from inventory_kernel.services.item_service import ItemService
from inventory_kernel.services.movement_ledger import MovementLedger
from inventory_kernel.services.movement_orchestrator import MovementOrchestrator

__all__ = [
    "ItemService",
    "MovementLedger",
    "MovementOrchestrator",
]
