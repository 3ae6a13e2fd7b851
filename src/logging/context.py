# src/logging/context.py — v2
"""Contextual logging support — attach run_id, category and operation to
log records emitted during a tracker pass."""

from __future__ import annotations

import contextvars
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

_run_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)
_category: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "category", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    run_id: str | None = None
    operation: str | None = None
    category: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        run_id=_run_id.get(),
        operation=_operation.get(),
        category=_category.get(),
    )


def set_category_context(category: str | None) -> None:
    """Set the category currently being evaluated."""
    _category.set(category)


@contextmanager
def operation_context(operation: str) -> Iterator[str]:
    """Scope log records to one tracker operation; yields its run_id."""
    run_id = uuid.uuid4().hex[:12]
    tokens = (_run_id.set(run_id), _operation.set(operation), _category.set(None))
    try:
        yield run_id
    finally:
        _category.reset(tokens[2])
        _operation.reset(tokens[1])
        _run_id.reset(tokens[0])


def clear_context() -> None:
    """Reset all context variables."""
    _run_id.set(None)
    _operation.set(None)
    _category.set(None)
