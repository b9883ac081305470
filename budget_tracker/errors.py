"""Exceptions and warnings raised by the budget tracker core."""

from __future__ import annotations

from typing import Iterable, List


class BudgetTrackerError(Exception):
    """Base class for budget tracker errors."""


class ValidationError(BudgetTrackerError, ValueError):
    """Raised when user input violates one or more field constraints.

    Every violated constraint is collected so callers can show them all
    at once instead of one at a time.
    """

    def __init__(self, errors: Iterable[str]):
        self.errors: List[str] = list(errors)
        super().__init__("; ".join(self.errors))


class PersistenceReadError(BudgetTrackerError):
    """Stored data is missing, unreadable or has the wrong shape."""


class PersistenceWriteError(BudgetTrackerError, OSError):
    """The storage slot could not be written."""


class PersistenceWriteWarning(UserWarning):
    """A save failed; the in-memory state is still authoritative."""
