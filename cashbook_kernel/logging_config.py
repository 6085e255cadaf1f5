"""
Module: cashbook_kernel.logging_config
Responsibility:
    One JSON object per log line for everything under the ``cashbook``
    logger namespace, with request-scoped fields (company, form, actor)
    merged in from context variables.

Architecture position:
    Kernel -- imported by every layer; imports nothing from the cashbook.

Invariants enforced:
    - Every line carries ``ts``, ``level``, ``logger`` and ``message``.
    - Decimals are written as strings so amounts keep their scale.
    - ``configure_logging`` installs exactly one handler however often it
      is called; ``reset_logging`` undoes it for tests.

Failure modes:
    - Values the encoder does not know fall back to ``str()``; a log call
      never raises because of its payload.
"""

from __future__ import annotations

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
from contextvars import ContextVar, Token
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterator, TextIO
from uuid import UUID

_NAMESPACE = "cashbook"

_CONTEXT_FIELDS = ("correlation_id", "company_id", "actor_id", "report_id", "form_code")

_context_vars: dict[str, ContextVar[str | None]] = {
    field: ContextVar(f"cashbook_log_{field}", default=None) for field in _CONTEXT_FIELDS
}


class LogContext:
    """
    Request-scoped fields added to every log line.

    Backed by ``contextvars`` so values follow threads and asyncio tasks.
    Unknown field names and ``None`` values are ignored.
    """

    @staticmethod
    def set(**fields: Any) -> None:
        for name, value in fields.items():
            var = _context_vars.get(name)
            if var is not None and value is not None:
                var.set(str(value))

    @staticmethod
    def get_all() -> dict[str, str]:
        return {
            name: value
            for name, var in _context_vars.items()
            if (value := var.get()) is not None
        }

    @staticmethod
    def clear() -> None:
        for var in _context_vars.values():
            var.set(None)

    @staticmethod
    @contextmanager
    def bind(**fields: Any) -> Iterator[type[LogContext]]:
        """Set fields for the duration of a ``with`` block, then restore them."""
        tokens: list[tuple[ContextVar[str | None], Token]] = []
        for name, value in fields.items():
            var = _context_vars.get(name)
            if var is not None and value is not None:
                tokens.append((var, var.set(str(value))))
        try:
            yield LogContext
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


# Attributes every LogRecord has; anything else on a record came from ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def _encode(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


class StructuredFormatter(logging.Formatter):
    """Render a record, its ``extra`` fields and the bound context as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        line: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        line.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and key not in line
        )
        if record.exc_info and record.exc_info[1] is not None:
            line.update(self._exception_fields(record))
        return json.dumps(line, default=_encode)

    def _exception_fields(self, record: logging.LogRecord) -> dict[str, Any]:
        exc = record.exc_info[1]
        fields: dict[str, Any] = {
            "exc_type": type(exc).__name__,
            "exc_message": str(exc),
        }
        code = getattr(exc, "code", None)
        if code is not None:
            fields["exc_code"] = code
        # CashbookError subclasses keep their context as public attributes
        for attr, value in vars(exc).items():
            if not attr.startswith("_") and attr not in ("args", "code"):
                fields[f"exc_{attr}"] = value
        fields["traceback"] = self.formatException(record.exc_info)
        return fields


def get_logger(name: str) -> logging.Logger:
    """``get_logger("engines.income_tax")`` -> ``cashbook.engines.income_tax``."""
    return logging.getLogger(f"{_NAMESPACE}.{name}")


_state_lock = threading.Lock()
_installed_handler: logging.Handler | None = None


def configure_logging(
    *,
    level: int = logging.INFO,
    stream: TextIO | None = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach a JSON handler to the ``cashbook`` logger.

    Only the first call has any effect until ``reset_logging`` runs.
    Records do not propagate to the root logger.
    """
    global _installed_handler
    with _state_lock:
        if _installed_handler is not None:
            return
        _installed_handler = handler or logging.StreamHandler(stream or sys.stderr)
        _installed_handler.setFormatter(StructuredFormatter())
        namespace_logger = logging.getLogger(_NAMESPACE)
        namespace_logger.setLevel(level)
        namespace_logger.propagate = False
        namespace_logger.addHandler(_installed_handler)


def reset_logging() -> None:
    """Drop every handler on the ``cashbook`` logger. Tests only."""
    global _installed_handler
    with _state_lock:
        _installed_handler = None
        namespace_logger = logging.getLogger(_NAMESPACE)
        namespace_logger.handlers.clear()
        namespace_logger.setLevel(logging.WARNING)
