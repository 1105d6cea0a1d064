"""
Inventory CLI -- command-line front end for the inventory kernel.

Create and edit items, record stock movements, and read movement history.
Each command runs in its own transaction.

Entry point: scripts/inventory.py or python -m scripts.cli
"""

from scripts.cli.main import main

__all__ = ["main"]
