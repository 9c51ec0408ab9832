"""Scoped fields for structured logging.

Fields pushed here (run_id, stage, location_code, url) are copied onto every
record emitted inside the scope by ``ContextualFilter``. Inner scopes shadow
outer ones and restore them on exit.
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Dict, Iterator

_fields: ContextVar[Dict[str, Any]] = ContextVar("log_fields", default={})


def get_log_context() -> Dict[str, Any]:
    """Snapshot of the active fields. Mutating it has no effect."""
    return dict(_fields.get())


def push_log_context(**fields: Any) -> Token:
    """Layer fields over the active context and return the restore token."""
    return _fields.set({**_fields.get(), **fields})


def pop_log_context(token: Token) -> None:
    _fields.reset(token)


def clear_log_context() -> None:
    _fields.set({})


@contextmanager
def log_context(**fields: Any) -> Iterator[Dict[str, Any]]:
    """Apply fields for the duration of a with block.

    Example:
        >>> with log_context(run_id="3f2a", stage="scrape"):
        ...     logger.info("Fetching search page")  # carries run_id and stage
    """
    token = push_log_context(**fields)
    try:
        yield get_log_context()
    finally:
        pop_log_context(token)
