"""
Module: inventory_kernel.models.stock_movement
Responsibility: ORM persistence for the stock movement ledger -- the
    append-only audit trail of every quantity-affecting event.
Architecture position: Kernel > Models.  May import from db/base.py only.
    MUST NOT import from services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - quantity > 0 (CHECK constraint); direction comes from ``type``.
    - type is one of IN, OUT, ADJUSTMENT, TRANSFER.
    - Rows are immutable once inserted (ORM listeners in db/immutability.py).
      The only removal path is ON DELETE CASCADE from the owning item.

Failure modes:
    - IntegrityError on a non-positive quantity or a dangling item_id.
    - ImmutabilityViolationError on UPDATE/DELETE through the ORM.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
    func,
)
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from inventory_kernel.db.base import Base, SurrogateKey


class MovementType(str, Enum):
    """Kind of stock movement.

    Contract: A closed set of exactly four tokens; any other token is a
    validation error at the boundary.
    """

    IN = "IN"
    OUT = "OUT"
    ADJUSTMENT = "ADJUSTMENT"
    TRANSFER = "TRANSFER"


class StockMovement(Base):
    """
    Immutable audit record of one quantity-affecting event against one item.

    Contract:
        Created only by MovementLedger inside MovementOrchestrator's
        transaction.  Never updated, never deleted except by cascade.

    Guarantees:
        - created_at is assigned at append time and defines ledger order;
          ties break on id, which is monotonically assigned.
    """

    __tablename__ = "stock_movements"

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_stock_movements_quantity_positive"),
        Index("idx_stock_movements_item_id", "item_id"),
        Index("idx_stock_movements_created_at", "created_at"),
    )

    item_id: Mapped[int] = mapped_column(
        SurrogateKey,
        ForeignKey("items.id", ondelete="CASCADE"),
        nullable=False,
    )

    type: Mapped[MovementType] = mapped_column(
        SAEnum(
            MovementType,
            name="stock_movement_type",
            native_enum=False,
            length=16,
            validate_strings=True,
        ),
        nullable=False,
    )

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    location_id_from: Mapped[int | None] = mapped_column(Integer, nullable=True)

    location_id_to: Mapped[int | None] = mapped_column(Integer, nullable=True)

    reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return (
            f"<StockMovement {self.id} item={self.item_id} "
            f"{self.type.value if self.type else None} {self.quantity}>"
        )
