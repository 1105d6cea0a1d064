"""
ItemService -- write side of the Item Store.

Responsibility:
    Item create, sparse update and delete, plus the two quantity primitives
    the movement orchestrator runs inside its transaction: a row-locking
    read and a quantity write.

Architecture position:
    Kernel > Services.  Flushes within the caller's session; never commits.

Invariants enforced:
    - Generic updates go through ItemPatch, which cannot carry ``quantity``.
      Only update_quantity() writes quantity, and only the orchestrator
      calls it.
    - lock_for_update() issues SELECT ... FOR UPDATE so concurrent movements
      on the same item serialize on the row lock (PostgreSQL).  On SQLite
      the BEGIN IMMEDIATE transaction already holds the write lock.
    - delete() is a bulk DELETE so the database cascade removes the item's
      movements without tripping the ledger immutability listeners.

Failure modes:
    - IntegrityError from CHECK constraints (negative quantity, empty name).
"""

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from inventory_kernel.domain.dtos import ItemCreate, ItemPatch, ItemRecord
from inventory_kernel.logging_config import get_logger
from inventory_kernel.models.item import Item
from inventory_kernel.services.base import BaseService

logger = get_logger("services.item")


class ItemService(BaseService[Item]):
    """
    Service for item records.

    Usage:
        with session_scope() as session:
            items = ItemService(session)
            record = items.create(ItemCreate(name="Drill", quantity=3))
            items.update(record.id, ItemPatch.of(location_id=7))
    """

    def __init__(self, session: Session):
        super().__init__(session)

    def create(self, data: ItemCreate) -> ItemRecord:
        """
        Insert a new item and return it as read back from the store.

        Postconditions:
            - ``id``, ``public_id``, ``created_at``, ``updated_at`` are
              assigned; ``quantity`` is the opening count from ``data``.
        """
        item = Item(
            name=data.name,
            description=data.description,
            category_id=data.category_id,
            location_id=data.location_id,
            quantity=data.quantity,
            price=data.price,
            purchase_date=data.purchase_date,
        )
        self.session.add(item)
        self.session.flush()
        self.session.refresh(item)

        logger.info(
            "item_created",
            extra={
                "item_id": item.id,
                "public_id": str(item.public_id),
                "quantity": item.quantity,
            },
        )
        return ItemRecord.from_model(item)

    def update(self, item_id: int, patch: ItemPatch) -> ItemRecord | None:
        """
        Apply only the fields named in ``patch``.

        Returns:
            The post-update record, or None when the patch is empty
            ("nothing changed") or the item does not exist.
        """
        if patch.is_empty:
            logger.debug("item_update_noop", extra={"item_id": item_id})
            return None

        item = self.session.get(Item, item_id)
        if item is None:
            logger.info("item_update_missing", extra={"item_id": item_id})
            return None

        for name, value in patch.values.items():
            setattr(item, name, value)

        self.session.flush()
        self.session.refresh(item)

        logger.info(
            "item_updated",
            extra={"item_id": item_id, "fields": sorted(patch.mask)},
        )
        return ItemRecord.from_model(item)

    def delete(self, item_id: int) -> bool:
        """
        Delete an item; its stock movements go with it by cascade.

        Returns:
            True if a row was removed.
        """
        result = self.session.execute(delete(Item).where(Item.id == item_id))
        removed = result.rowcount > 0

        logger.info(
            "item_deleted" if removed else "item_delete_missing",
            extra={"item_id": item_id},
        )
        return removed

    def lock_for_update(self, item_id: int) -> Item | None:
        """
        Read an item with a row-level lock held until the transaction ends.

        Preconditions:
            - The caller is within an active transaction it will end.
        """
        return self.session.execute(
            select(Item)
            .where(Item.id == item_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def update_quantity(self, item_id: int, new_quantity: int) -> bool:
        """
        Write a new on-hand quantity within the caller's transaction.

        Returns:
            True if the item row was updated.
        """
        result = self.session.execute(
            update(Item)
            .where(Item.id == item_id)
            .values(quantity=new_quantity)
        )
        return result.rowcount > 0
