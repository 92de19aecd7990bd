"""Rejection auditing.

A filter that refuses a value returns the sentinel instead of raising. To
keep those refusals observable, each one is recorded as a :class:`Rejection`
and appended to the active sink (see :func:`collect_rejections`), and logged
at DEBUG level. If no sink is active the record is only logged.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

logger = logging.getLogger(__name__)

# Longest slice of the rejected value kept in a record.
_MAX_VALUE_CHARS = 200


class Rejection:
    """A value refused by a filter."""

    __slots__ = ("code", "message", "value")

    def __init__(self, code, value, message=None):
        self.code = code
        self.value = value
        self.message = message or code

    def __repr__(self):
        return f"Rejection({self.code!r}, value={self.value!r})"

    def __str__(self):
        if self.message != self.code:
            return f"{self.code} - {self.message}"
        return self.code

    def __eq__(self, other):
        if not isinstance(other, Rejection):
            return NotImplemented
        return self.code == other.code and self.value == other.value

    __hash__ = None  # Unhashable since we define __eq__


_REJECTION_SINK: ContextVar[list[Rejection] | None] = ContextVar("outputsafe_rejection_sink", default=None)


def emit_rejection(code: str, value: str, message: str | None = None) -> None:
    """Record that `value` was replaced by the sentinel."""

    if len(value) > _MAX_VALUE_CHARS:
        value = value[:_MAX_VALUE_CHARS]
    logger.debug("Rejected value (%s): %r", code, value)

    sink = _REJECTION_SINK.get()
    if sink is None:
        return
    sink.append(Rejection(code, value, message))


@contextmanager
def collect_rejections() -> Iterator[list[Rejection]]:
    """Collect every rejection made inside the ``with`` block.

    The sink is a context variable, so concurrent threads and tasks each see
    only their own rejections. Nested blocks collect independently.
    """

    rejections: list[Rejection] = []
    token = _REJECTION_SINK.set(rejections)
    try:
        yield rejections
    finally:
        _REJECTION_SINK.reset(token)
