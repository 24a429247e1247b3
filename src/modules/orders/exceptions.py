"""Order domain exceptions.

Raised by the repository when a write cannot be accepted.  "Not found"
is never an exception here: reads return ``None`` and mutations return
an affected-row count of ``0``.  Database failures (``django.db.Error``)
that are not uniqueness collisions propagate unchanged.
"""

from __future__ import annotations


class OrderConflict(Exception):
    """Write collided with an existing primary key or order number.

    The existing row is left untouched.  Callers may retry with a new
    identifier or give up.
    """


class InvalidOrder(ValueError):
    """Order fields failed validation; nothing was written.

    ``errors`` maps field names to their validation messages.
    """

    def __init__(self, message: str, errors: dict[str, list[str]] | None = None):
        super().__init__(message)
        self.errors = errors or {}


class InvalidOrderTotal(InvalidOrder):
    """An order total is negative or not a finite amount."""
