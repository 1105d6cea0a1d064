"""
Typed Exception Hierarchy for the Inventory Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the stock movement path need to react differently to "the item is
gone", "there is not enough stock" and "the database gave up". Matching on
message strings is fragile, so every error here has:
  1. A TYPED exception class (catch by type, not message)
  2. A CODE class attribute (machine-readable, API-safe)
  3. An HTTP_STATUS class attribute (what a web layer should answer)
  4. Structured DATA attributes (not just a message string)

Example:
    try:
        orchestrator.record_movement(request)
    except InsufficientStockError as e:
        respond(e.http_status, code=e.code, available=e.available)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    InventoryKernelError (base)
    |
    +-- ItemError
    |   +-- ItemNotFoundError
    |   +-- InvalidItemFieldError
    |
    +-- StockError
    |   +-- InsufficientStockError
    |   +-- InvalidMovementError
    |
    +-- TransactionError
    |   +-- TransactionFailedError
    |
    +-- ImmutabilityError
        +-- ImmutabilityViolationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category      | Code                   | Status | When Raised
--------------|------------------------|--------|-------------------------------
Item          | ITEM_NOT_FOUND         | 404    | Item ID doesn't exist
              | INVALID_ITEM_FIELD     | 400    | Bad create/patch field
--------------|------------------------|--------|-------------------------------
Stock         | INSUFFICIENT_STOCK     | 400    | OUT/TRANSFER exceeds on-hand
              | INVALID_MOVEMENT       | 400    | Bad type token or quantity
--------------|------------------------|--------|-------------------------------
Transaction   | TRANSACTION_FAILED     | 500    | Store failure, rolled back;
              |                        |        | safe to retry
--------------|------------------------|--------|-------------------------------
Immutability  | IMMUTABILITY_VIOLATION | 500    | Update/delete of a movement
"""


class InventoryKernelError(Exception):
    """
    Base exception for all inventory kernel errors.

    All subclasses must have `code` and `http_status` class attributes.
    """

    code: str = "INVENTORY_KERNEL_ERROR"
    http_status: int = 500


# Item-related exceptions


class ItemError(InventoryKernelError):
    """Base exception for item-related errors."""

    code: str = "ITEM_ERROR"


class ItemNotFoundError(ItemError):
    """Item with given ID was not found."""

    code: str = "ITEM_NOT_FOUND"
    http_status: int = 404

    def __init__(self, item_id: int | str):
        self.item_id = item_id
        super().__init__(f"Item not found: {item_id}")


class InvalidItemFieldError(ItemError):
    """
    An item create or patch carried an invalid field.

    Raised for unknown fields, an empty name, a negative opening quantity,
    and for any attempt to patch ``quantity`` (stock only changes through
    recorded movements).
    """

    code: str = "INVALID_ITEM_FIELD"
    http_status: int = 400

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid item field '{field}': {reason}")


# Stock-related exceptions


class StockError(InventoryKernelError):
    """Base exception for stock movement errors."""

    code: str = "STOCK_ERROR"
    http_status: int = 400


class InsufficientStockError(StockError):
    """Requested OUT/TRANSFER quantity exceeds the item's on-hand quantity."""

    code: str = "INSUFFICIENT_STOCK"

    def __init__(self, item_id: int, requested: int, available: int):
        self.item_id = item_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for item {item_id}: "
            f"requested {requested}, available {available}"
        )


class InvalidMovementError(StockError):
    """Movement request failed boundary validation."""

    code: str = "INVALID_MOVEMENT"

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid stock movement: {reason}")


# Transaction-related exceptions


class TransactionError(InventoryKernelError):
    """Base exception for transactional failures."""

    code: str = "TRANSACTION_ERROR"


class TransactionFailedError(TransactionError):
    """
    The store failed while the transaction was open.

    Everything done inside the transaction has been rolled back, so the
    operation is safe to retry. The underlying exception is chained as
    ``__cause__`` and summarized in ``cause``.
    """

    code: str = "TRANSACTION_FAILED"

    def __init__(self, operation: str, cause: str):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Transaction failed during {operation}: {cause}")


# Immutability-related exceptions


class ImmutabilityError(InventoryKernelError):
    """Base exception for immutability-related errors."""

    code: str = "IMMUTABILITY_ERROR"


class ImmutabilityViolationError(ImmutabilityError):
    """Attempted to modify or delete an append-only record."""

    code: str = "IMMUTABILITY_VIOLATION"

    def __init__(self, entity_type: str, entity_id: str, reason: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(
            f"Immutability violation on {entity_type} {entity_id}: {reason}"
        )
