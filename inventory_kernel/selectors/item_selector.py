"""
Module: inventory_kernel.selectors.item_selector
Responsibility: Read-only access to item records.
Architecture position: Kernel > Selectors.

Failure modes:
    - Returns None / empty list when nothing matches (never raises on
      absence of data).
"""

from uuid import UUID

from sqlalchemy import select

from inventory_kernel.domain.dtos import ItemRecord
from inventory_kernel.models.item import Item
from inventory_kernel.selectors.base import BaseSelector


class ItemSelector(BaseSelector[Item]):
    """Selector for item records."""

    def get(self, item_id: int) -> ItemRecord | None:
        """Item by surrogate id, or None."""
        item = self.session.execute(
            select(Item)
            .where(Item.id == item_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        return ItemRecord.from_model(item) if item else None

    def get_by_public_id(self, public_id: UUID) -> ItemRecord | None:
        """Item by its external UUID, or None."""
        item = self.session.execute(
            select(Item)
            .where(Item.public_id == public_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        return ItemRecord.from_model(item) if item else None

    def list_all(self) -> list[ItemRecord]:
        """All items, oldest first."""
        items = self.session.execute(
            select(Item)
            .order_by(Item.id)
            .execution_options(populate_existing=True)
        ).scalars().all()
        return [ItemRecord.from_model(item) for item in items]
