"""
Inventory Kernel

Item records plus an append-only stock movement ledger, with:
- Atomic quantity updates (item row and ledger row commit together)
- Row-level locking for concurrent movements on the same item
- Non-negative on-hand quantity
- Immutable movement history
"""

__version__ = "0.1.0"
