"""
Module: inventory_kernel.models.item
Responsibility: ORM persistence for inventory items -- the single source of
    truth for "how much of this item exists".
Architecture position: Kernel > Models.  May import from db/base.py only.
    MUST NOT import from services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - quantity >= 0 (CHECK constraint ck_items_quantity_non_negative).
    - name is non-empty (CHECK constraint ck_items_name_not_empty).
    - Deleting an item cascades to its stock movements at the database level
      (ON DELETE CASCADE on stock_movements.item_id).

Failure modes:
    - IntegrityError if a write would leave quantity negative or name empty.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import TimestampedBase


class Item(TimestampedBase):
    """
    A tracked inventory entity with a single scalar on-hand quantity.

    Contract:
        ``quantity`` changes only through MovementOrchestrator so that every
        change has a matching ledger row.  Descriptive fields are freely
        editable through ItemService.

    Non-goals:
        - No per-location stock.  ``location_id`` is a single tag; splitting
          stock across locations would need a separate association table.
    """

    __tablename__ = "items"

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_items_quantity_non_negative"),
        CheckConstraint("length(name) > 0", name="ck_items_name_not_empty"),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    category_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    location_id: Mapped[int | None] = mapped_column(Integer, nullable=True)

    quantity: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
    )

    price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)

    purchase_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Item {self.id} {self.name!r} qty={self.quantity}>"
