"""CLI main: argument parsing and command dispatch."""

import argparse
import logging
import sys

import yaml
from sqlalchemy.exc import SQLAlchemyError

from inventory_kernel.db.engine import (
    create_tables,
    init_engine_from_url,
    reset_engine,
    session_scope,
)
from inventory_kernel.domain.dtos import (
    EDITABLE_ITEM_FIELDS,
    ItemCreate,
    ItemPatch,
    MovementRequest,
)
from inventory_kernel.exceptions import InventoryKernelError, ItemNotFoundError
from inventory_kernel.logging_config import configure_logging, get_logger
from inventory_kernel.models.stock_movement import MovementType
from inventory_kernel.selectors import ItemSelector, MovementSelector
from inventory_kernel.services import ItemService, MovementOrchestrator
from scripts.cli import config as cli_config
from scripts.cli.util import (
    fmt_item,
    fmt_item_detail,
    fmt_movement,
    iso_datetime,
)

logger = get_logger("cli")

_NULLABLE_FIELDS = sorted(EDITABLE_ITEM_FIELDS - {"name"})


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_init_db(args) -> int:
    create_tables()
    print("  Tables ready.")
    return 0


def cmd_add_item(args) -> int:
    data = ItemCreate(
        name=args.name,
        description=args.description,
        category_id=args.category_id,
        location_id=args.location_id,
        quantity=args.quantity,
        price=args.price,
        purchase_date=args.purchase_date,
    )
    with session_scope() as session:
        record = ItemService(session).create(data)
    print(fmt_item(record))
    return 0


def cmd_list_items(args) -> int:
    with session_scope() as session:
        records = ItemSelector(session).list_all()
    if not records:
        print("  (no items)")
    for record in records:
        print(fmt_item(record))
    return 0


def cmd_show_item(args) -> int:
    with session_scope() as session:
        record = ItemSelector(session).get(args.item_id)
    if record is None:
        raise ItemNotFoundError(args.item_id)
    for line in fmt_item_detail(record):
        print(line)
    return 0


def cmd_update_item(args) -> int:
    values = {
        name: getattr(args, name)
        for name in EDITABLE_ITEM_FIELDS
        if hasattr(args, name)
    }
    for name in args.clear or ():
        values[name] = None

    patch = ItemPatch(values)
    if patch.is_empty:
        print("  Nothing to change.")
        return 0

    with session_scope() as session:
        record = ItemService(session).update(args.item_id, patch)
    if record is None:
        raise ItemNotFoundError(args.item_id)
    print(fmt_item(record))
    return 0


def cmd_delete_item(args) -> int:
    with session_scope() as session:
        removed = ItemService(session).delete(args.item_id)
    if not removed:
        raise ItemNotFoundError(args.item_id)
    print(f"  Deleted item #{args.item_id} and its movement history.")
    return 0


def cmd_move(args) -> int:
    request = MovementRequest(
        item_id=args.item_id,
        type=args.type,
        quantity=args.quantity,
        location_id_from=args.location_from,
        location_id_to=args.location_to,
        reason=args.reason,
    )
    with session_scope() as session:
        record = MovementOrchestrator(session).record_movement(request)
        item = ItemSelector(session).get(args.item_id)
    print(fmt_movement(record))
    if item is not None:
        print(f"  On hand: {item.quantity}")
    return 0


def cmd_history(args) -> int:
    with session_scope() as session:
        movements = MovementSelector(session).history(args.item_id)
    if not movements:
        print("  (no movements)")
    for movement in movements:
        print(fmt_movement(movement))
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inventory",
        description="Items, stock movements and movement history.",
    )
    parser.add_argument("--config", help="Settings YAML (default: packaged defaults)")
    parser.add_argument("--database-url", help="Overrides the configured database URL")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Overrides the configured log level",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("init-db", help="Create tables")
    p.set_defaults(func=cmd_init_db)

    p = sub.add_parser("add-item", help="Create an item")
    p.add_argument("--name", required=True)
    p.add_argument("--description")
    p.add_argument("--category-id", type=int)
    p.add_argument("--location-id", type=int)
    p.add_argument("--quantity", type=int, default=0, help="Opening on-hand count")
    p.add_argument("--price")
    p.add_argument("--purchase-date", type=iso_datetime)
    p.set_defaults(func=cmd_add_item)

    p = sub.add_parser("list-items", help="List all items")
    p.set_defaults(func=cmd_list_items)

    p = sub.add_parser("show-item", help="Show one item")
    p.add_argument("item_id", type=int)
    p.set_defaults(func=cmd_show_item)

    # Absent options stay absent so only named fields are patched
    p = sub.add_parser("update-item", help="Change descriptive fields of an item")
    p.add_argument("item_id", type=int)
    p.add_argument("--name", default=argparse.SUPPRESS)
    p.add_argument("--description", default=argparse.SUPPRESS)
    p.add_argument("--category-id", type=int, default=argparse.SUPPRESS)
    p.add_argument("--location-id", type=int, default=argparse.SUPPRESS)
    p.add_argument("--price", default=argparse.SUPPRESS)
    p.add_argument("--purchase-date", type=iso_datetime, default=argparse.SUPPRESS)
    p.add_argument(
        "--clear",
        action="append",
        choices=_NULLABLE_FIELDS,
        metavar="FIELD",
        help=f"Set a field to empty; one of {', '.join(_NULLABLE_FIELDS)}",
    )
    p.set_defaults(func=cmd_update_item)

    p = sub.add_parser("delete-item", help="Delete an item and its history")
    p.add_argument("item_id", type=int)
    p.set_defaults(func=cmd_delete_item)

    p = sub.add_parser("move", help="Record a stock movement")
    p.add_argument("item_id", type=int)
    p.add_argument("type", type=str.upper, choices=[t.value for t in MovementType])
    p.add_argument("quantity", type=int)
    p.add_argument("--from", dest="location_from", type=int)
    p.add_argument("--to", dest="location_to", type=int)
    p.add_argument("--reason")
    p.set_defaults(func=cmd_move)

    p = sub.add_parser("history", help="Movement history, most recent first")
    p.add_argument("item_id", type=int)
    p.set_defaults(func=cmd_history)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = cli_config.load_settings(
            args.config, args.database_url, args.log_level
        )
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    configure_logging(level=getattr(logging, settings.logging.level))
    logger.debug("cli_command", extra={"command": args.command})
    try:
        db = settings.database
        init_engine_from_url(
            db.url,
            echo=db.echo,
            pool_size=db.pool_size,
            max_overflow=db.max_overflow,
            pool_timeout=db.pool_timeout,
            pool_recycle=db.pool_recycle,
            sqlite_busy_timeout=db.sqlite_busy_timeout,
        )
        return args.func(args)
    except InventoryKernelError as exc:
        print(f"  ERROR [{exc.code}]: {exc}", file=sys.stderr)
        return 1
    except SQLAlchemyError as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1
    finally:
        reset_engine()
