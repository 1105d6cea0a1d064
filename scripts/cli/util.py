"""CLI utilities: formatting, argument parsing helpers."""

import argparse
from datetime import datetime
from decimal import Decimal

from inventory_kernel.domain.dtos import ItemRecord, StockMovementRecord


def fmt_amount(v) -> str:
    """Format a price for display (e.g. $1,234.50)."""
    if v is None:
        return "-"
    d = Decimal(str(v))
    return f"${d:,.2f}"


def fmt_item(r: ItemRecord) -> str:
    """One-line summary of an item."""
    loc = r.location_id if r.location_id is not None else "-"
    return f"  {r.id:>5}  {r.name:<30} qty={r.quantity:<6} loc={loc:<5} price={fmt_amount(r.price)}"


def fmt_item_detail(r: ItemRecord) -> list[str]:
    """Multi-line view of an item."""
    return [
        f"  Item #{r.id}  ({r.public_id})",
        f"    name:          {r.name}",
        f"    description:   {r.description or '-'}",
        f"    category_id:   {r.category_id if r.category_id is not None else '-'}",
        f"    location_id:   {r.location_id if r.location_id is not None else '-'}",
        f"    quantity:      {r.quantity}",
        f"    price:         {fmt_amount(r.price)}",
        f"    purchase_date: {r.purchase_date.isoformat() if r.purchase_date else '-'}",
        f"    created_at:    {r.created_at}",
        f"    updated_at:    {r.updated_at}",
    ]


def fmt_movement(m: StockMovementRecord) -> str:
    """One-line summary of a ledger row."""
    route = ""
    if m.location_id_from is not None or m.location_id_to is not None:
        src = m.location_id_from if m.location_id_from is not None else "?"
        dst = m.location_id_to if m.location_id_to is not None else "?"
        route = f"  {src} -> {dst}"
    reason = f"  ({m.reason})" if m.reason else ""
    return f"  {m.id:>6}  {m.created_at}  {m.type.value:<10} {m.quantity:>6}{route}{reason}"


def iso_datetime(value: str) -> datetime:
    """argparse type for ISO-8601 timestamps."""
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an ISO-8601 datetime: {value!r}")
