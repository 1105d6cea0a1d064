"""
Structured JSON logging for the inventory kernel.

Every record under the ``inventory_kernel`` logger becomes one JSON line:
``ts``, ``level``, ``logger`` and ``message`` first, then the fields bound
through LogContext (the movement's ``correlation_id`` and ``item_id``), then
whatever the call site passed in ``extra``.  Kernel exceptions logged with
``exc_info`` contribute their ``code`` and structured attributes as
``exc_*`` fields.
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterator
from uuid import UUID

from inventory_kernel.exceptions import InventoryKernelError

_LOGGER_PREFIX = "inventory_kernel"


class LogContext:
    """Per-movement log fields, held in context vars so threads don't mix them."""

    _vars: dict[str, ContextVar[str | None]] = {
        "correlation_id": ContextVar("inventory_correlation_id", default=None),
        "item_id": ContextVar("inventory_item_id", default=None),
    }

    @classmethod
    def _var(cls, name: str) -> ContextVar[str | None]:
        try:
            return cls._vars[name]
        except KeyError:
            raise TypeError(f"unknown log context field: {name!r}") from None

    @classmethod
    def set(cls, **fields: str | None) -> None:
        """Set context fields; None values leave the current value alone."""
        for name, value in fields.items():
            var = cls._var(name)
            if value is not None:
                var.set(value)

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return {
            name: value
            for name, var in cls._vars.items()
            if (value := var.get()) is not None
        }

    @classmethod
    def clear(cls) -> None:
        for var in cls._vars.values():
            var.set(None)

    @classmethod
    @contextmanager
    def bind(cls, **fields: str | None) -> Iterator[None]:
        """Set fields for the duration of a block, then restore the old values."""
        bound = [(cls._var(name), value) for name, value in fields.items()]
        tokens = [(var, var.set(value)) for var, value in bound if value is not None]
        try:
            yield
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


# ---------------------------------------------------------------------------
# JSON Formatter
# ---------------------------------------------------------------------------

# Attributes every LogRecord carries; anything else came from ``extra``
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _to_json(value: Any) -> Any:
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    if isinstance(exc, InventoryKernelError):
        fields["exc_code"] = exc.code
        for name, value in vars(exc).items():
            if not name.startswith("_"):
                fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """Formats each log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and key not in payload
        )

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_to_json)


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the inventory_kernel namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


# ---------------------------------------------------------------------------
# Initialization
# ---------------------------------------------------------------------------

_lock = threading.Lock()
_installed: logging.Handler | None = None


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Install the JSON handler on the inventory_kernel logger.

    Only the first call takes effect until reset_logging() is called.
    Handlers attached by anything else (test log capture, for example)
    are left in place.
    """
    global _installed
    with _lock:
        if _installed is not None:
            return
        _installed = handler or logging.StreamHandler(stream or sys.stderr)
        _installed.setFormatter(StructuredFormatter())

        kernel_logger = logging.getLogger(_LOGGER_PREFIX)
        kernel_logger.setLevel(level)
        kernel_logger.propagate = False
        kernel_logger.addHandler(_installed)


def reset_logging() -> None:
    """Remove the handler configure_logging() installed. For tests."""
    global _installed
    with _lock:
        kernel_logger = logging.getLogger(_LOGGER_PREFIX)
        if _installed is not None:
            kernel_logger.removeHandler(_installed)
            _installed = None
        kernel_logger.setLevel(logging.WARNING)
        kernel_logger.propagate = True
