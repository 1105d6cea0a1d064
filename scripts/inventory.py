#!/usr/bin/env python3
"""
Inventory CLI.

Usage:
    python3 scripts/inventory.py add-item --name "Drill" --quantity 10
    python3 scripts/inventory.py move 1 OUT 3 --reason "site job"
    python3 scripts/inventory.py history 1
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from scripts.cli.main import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
