"""Context-local structured fields for log lines.

Fields bound here are attached to every record emitted in the same context
(thread or task), so adapter calls can tag their logs with component and
path references once.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from types import MappingProxyType
from typing import Iterator, Mapping

_EMPTY: Mapping[str, str] = MappingProxyType({})
_LOG_CONTEXT: ContextVar[Mapping[str, str]] = ContextVar(
    "blobfs_log_context", default=_EMPTY
)


def get_context() -> dict[str, str]:
    """Return a mutable copy of the bound fields."""
    return dict(_LOG_CONTEXT.get())


def bind_context(**values: object) -> None:
    """Bind fields for the rest of the current context.

    Values are stored as strings; ``None`` values are skipped.
    """
    additions = {key: str(value) for key, value in values.items() if value is not None}
    if additions:
        _LOG_CONTEXT.set(MappingProxyType({**_LOG_CONTEXT.get(), **additions}))


def clear_context(*keys: str) -> None:
    """Drop the named fields, or every field when none are named."""
    if not keys:
        _LOG_CONTEXT.set(_EMPTY)
        return
    remaining = {
        key: value for key, value in _LOG_CONTEXT.get().items() if key not in keys
    }
    _LOG_CONTEXT.set(MappingProxyType(remaining))


@contextmanager
def log_context(values: Mapping[str, object]) -> Iterator[None]:
    """Bind ``values`` for the duration of the block only."""
    token = _LOG_CONTEXT.set(_LOG_CONTEXT.get())
    try:
        bind_context(**dict(values))
        yield
    finally:
        _LOG_CONTEXT.reset(token)
