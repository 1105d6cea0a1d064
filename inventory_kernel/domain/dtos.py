"""
DTOs -- Immutable data structures crossing the kernel boundary.

Responsibility:
    Defines the request objects callers hand to services (MovementRequest,
    ItemCreate, ItemPatch) and the records services and selectors hand back
    (ItemRecord, StockMovementRecord).

Architecture position:
    Kernel > Domain.  Free of sessions and database access.  from_model()
    class methods are boundary converters invoked from services/selectors.

Invariants enforced:
    - MovementRequest.quantity is a positive int; type is one of the four
      MovementType tokens.  Checked at construction, before any transaction.
    - ItemPatch never carries ``quantity``: stock only changes through the
      movement orchestrator, so the ledger explains every quantity.
    - Records are frozen; callers cannot mutate what the store returned.

Failure modes:
    - InvalidMovementError on a bad movement request.
    - InvalidItemFieldError on a bad create/patch field.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping
from uuid import UUID

from inventory_kernel.exceptions import InvalidItemFieldError, InvalidMovementError
from inventory_kernel.models.stock_movement import MovementType

if TYPE_CHECKING:
    from inventory_kernel.models.item import Item as ItemModel
    from inventory_kernel.models.stock_movement import (
        StockMovement as StockMovementModel,
    )


# Fields a generic item update may touch.  quantity is deliberately absent.
EDITABLE_ITEM_FIELDS: frozenset[str] = frozenset(
    {
        "name",
        "description",
        "category_id",
        "location_id",
        "price",
        "purchase_date",
    }
)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _optional_int(value: Any, name: str, error_factory) -> None:
    if value is not None and not _is_int(value):
        raise error_factory(name, f"must be an integer or None, got {value!r}")


def _coerce_price(value: Any) -> Decimal | None:
    if value is None or isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidItemFieldError("price", f"not a number: {value!r}")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        raise InvalidItemFieldError("price", f"not a number: {value!r}")


def _check_name(value: Any) -> None:
    if not isinstance(value, str) or not value.strip():
        raise InvalidItemFieldError("name", "must be a non-empty string")


# ---------------------------------------------------------------------------
# Stock movements
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MovementRequest:
    """
    A request to move stock for one item.

    ``quantity`` is always a positive magnitude; direction comes from
    ``type``.  A string ``type`` is coerced to MovementType.
    """

    item_id: int
    type: MovementType
    quantity: int
    location_id_from: int | None = None
    location_id_to: int | None = None
    reason: str | None = None

    def __post_init__(self) -> None:
        if not _is_int(self.item_id):
            raise InvalidMovementError(f"item_id must be an integer, got {self.item_id!r}")

        if not isinstance(self.type, MovementType):
            try:
                object.__setattr__(self, "type", MovementType(self.type))
            except (ValueError, TypeError):
                allowed = ", ".join(t.value for t in MovementType)
                raise InvalidMovementError(
                    f"type must be one of {allowed}, got {self.type!r}"
                )

        if not _is_int(self.quantity) or self.quantity <= 0:
            raise InvalidMovementError(
                f"quantity must be a positive integer, got {self.quantity!r}"
            )

        for name in ("location_id_from", "location_id_to"):
            _optional_int(
                getattr(self, name),
                name,
                lambda n, r: InvalidMovementError(f"{n} {r}"),
            )

        if self.reason is not None and not isinstance(self.reason, str):
            raise InvalidMovementError(f"reason must be a string, got {self.reason!r}")


@dataclass(frozen=True)
class StockMovementRecord:
    """Persisted stock movement, as read back from the ledger."""

    id: int
    public_id: UUID
    item_id: int
    type: MovementType
    quantity: int
    location_id_from: int | None
    location_id_to: int | None
    reason: str | None
    created_at: datetime

    @classmethod
    def from_model(cls, model: StockMovementModel) -> StockMovementRecord:
        return cls(
            id=model.id,
            public_id=model.public_id,
            item_id=model.item_id,
            type=MovementType(model.type),
            quantity=model.quantity,
            location_id_from=model.location_id_from,
            location_id_to=model.location_id_to,
            reason=model.reason,
            created_at=model.created_at,
        )


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ItemCreate:
    """Fields for a new item.  ``quantity`` is the opening on-hand count."""

    name: str
    description: str | None = None
    category_id: int | None = None
    location_id: int | None = None
    quantity: int = 0
    price: Decimal | None = None
    purchase_date: datetime | None = None

    def __post_init__(self) -> None:
        _check_name(self.name)
        if not _is_int(self.quantity) or self.quantity < 0:
            raise InvalidItemFieldError(
                "quantity", f"must be a non-negative integer, got {self.quantity!r}"
            )
        _optional_int(self.category_id, "category_id", InvalidItemFieldError)
        _optional_int(self.location_id, "location_id", InvalidItemFieldError)
        object.__setattr__(self, "price", _coerce_price(self.price))


@dataclass(frozen=True)
class ItemPatch:
    """
    Sparse item update: a field mask plus the new values.

    Only fields present in ``values`` change; a present field set to None
    clears it.  An empty patch changes nothing.

    Usage:
        patch = ItemPatch.of(name="Cordless drill", location_id=None)
        patch.mask  # frozenset({"name", "location_id"})
    """

    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        values = dict(self.values)
        for name in values:
            if name == "quantity":
                raise InvalidItemFieldError(
                    "quantity",
                    "stock changes must be recorded as stock movements",
                )
            if name not in EDITABLE_ITEM_FIELDS:
                raise InvalidItemFieldError(name, "unknown or read-only field")

        if "name" in values:
            _check_name(values["name"])
        for name in ("category_id", "location_id"):
            if name in values:
                _optional_int(values[name], name, InvalidItemFieldError)
        if "price" in values:
            values["price"] = _coerce_price(values["price"])

        object.__setattr__(self, "values", MappingProxyType(values))

    @classmethod
    def of(cls, **values: Any) -> ItemPatch:
        return cls(values)

    @property
    def mask(self) -> frozenset[str]:
        """Names of the fields this patch changes."""
        return frozenset(self.values)

    @property
    def is_empty(self) -> bool:
        return not self.values


@dataclass(frozen=True)
class ItemRecord:
    """Persisted item, as read back from the store."""

    id: int
    public_id: UUID
    name: str
    description: str | None
    category_id: int | None
    location_id: int | None
    quantity: int
    price: Decimal | None
    purchase_date: datetime | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, model: ItemModel) -> ItemRecord:
        return cls(
            id=model.id,
            public_id=model.public_id,
            name=model.name,
            description=model.description,
            category_id=model.category_id,
            location_id=model.location_id,
            quantity=model.quantity,
            price=model.price,
            purchase_date=model.purchase_date,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
