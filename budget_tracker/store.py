"""The budget store: transactions, budgets and the figures derived from them.

The store is created once per session from :meth:`BudgetStorage.load`.
Each mutation saves the full post-mutation state exactly once before it
returns. Derived figures are recomputed from the two collections on
every read.
"""

from __future__ import annotations

import uuid
import warnings
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd

from . import analytics
from .analytics import DateLike
from .errors import PersistenceWriteError, PersistenceWriteWarning
from .models import Budget, BudgetState, Transaction
from .storage import BudgetStorage

TRANSACTION_FILTERS = ('all', 'income', 'expense')
TRANSACTION_SORTS = ('insertion', 'date', 'amount')


class BudgetStore:
    """Single source of truth for transactions and budgets.

    Mutations expect input that already passed
    :func:`budget_tracker.validation.validate_transaction` or
    :func:`budget_tracker.validation.validate_budget`.

    ``last_save_error`` holds the message of the most recent failed save
    and is reset to None once a save succeeds.
    """

    def __init__(self, storage: BudgetStorage, state: Optional[BudgetState] = None):
        self.storage = storage
        self._state = state if state is not None else BudgetState.empty()
        self.last_save_error: Optional[str] = None

    @classmethod
    def open(cls, storage: Optional[BudgetStorage] = None) -> 'BudgetStore':
        """Create a store from whatever ``storage`` holds (empty if nothing usable)."""
        storage = storage or BudgetStorage()
        return cls(storage, storage.load())

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> BudgetState:
        return BudgetState(
            transactions=list(self._state.transactions),
            budgets=list(self._state.budgets),
        )

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return tuple(self._state.transactions)

    @property
    def budgets(self) -> Tuple[Budget, ...]:
        return tuple(self._state.budgets)

    def _persist(self) -> None:
        """Save the full state, recording the outcome in ``last_save_error``."""
        try:
            self.storage.save(self._state)
        except PersistenceWriteError as e:
            self.last_save_error = f"Changes are kept in memory but could not be saved: {e}"
            warnings.warn(
                self.last_save_error,
                PersistenceWriteWarning,
                stacklevel=3,
            )
        else:
            self.last_save_error = None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_transaction(self, fields: Mapping[str, Any]) -> Transaction:
        """Record a new transaction at the front of the collection.

        Args:
            fields: Validated ``type``, ``amount``, ``category``,
                ``description`` and ``date``

        Returns:
            The created transaction with its generated id
        """
        existing = {t.id for t in self._state.transactions}
        new_id = uuid.uuid4().hex
        while new_id in existing:
            new_id = uuid.uuid4().hex

        transaction = Transaction(
            id=new_id,
            type=fields['type'],
            amount=float(fields['amount']),
            category=fields['category'],
            description=fields['description'],
            date=fields['date'],
        )
        self._state.transactions = [transaction] + self._state.transactions
        self._persist()
        return transaction

    def delete_transaction(self, transaction_id: str) -> bool:
        """Remove the transaction with ``transaction_id``.

        Unknown ids leave the state unchanged.

        Returns:
            True if a transaction was removed
        """
        remaining = [t for t in self._state.transactions if t.id != transaction_id]
        removed = len(remaining) != len(self._state.transactions)
        self._state.transactions = remaining
        self._persist()
        return removed

    def set_budget(self, category: str, limit: float) -> Budget:
        """Create or replace the budget for ``category``.

        An existing budget keeps its position; a new one is appended.
        ``spent`` records the category's expense total at this moment.
        """
        budget = Budget(
            category=category,
            limit=float(limit),
            spent=self.get_category_spend(category),
        )

        budgets = list(self._state.budgets)
        for index, existing in enumerate(budgets):
            if existing.category == category:
                budgets[index] = budget
                break
        else:
            budgets.append(budget)

        self._state.budgets = budgets
        self._persist()
        return budget

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def transactions_frame(self) -> pd.DataFrame:
        return analytics.transactions_frame(self._state.transactions)

    def get_balance(self) -> Dict[str, float]:
        return analytics.balance_totals(self.transactions_frame())

    def get_category_spend(self, category: str) -> float:
        return analytics.category_spend(self.transactions_frame(), category)

    def get_budgets_with_progress(self) -> List[Dict[str, Any]]:
        return analytics.budget_progress(self.transactions_frame(), self._state.budgets)

    def get_category_breakdown(self, period_start: DateLike, period_end: DateLike) -> List[Dict[str, Any]]:
        return analytics.category_breakdown(self.transactions_frame(), period_start, period_end)

    def get_trend(self, period_start: DateLike, period_end: DateLike, bucketing: str = 'month') -> List[Dict[str, Any]]:
        return analytics.trend(self.transactions_frame(), period_start, period_end, bucketing)

    def get_period_summary(self, period_start: DateLike, period_end: DateLike) -> Dict[str, Any]:
        return analytics.period_summary(self.transactions_frame(), period_start, period_end)

    def list_transactions(self, kind: str = 'all', sort_by: str = 'insertion') -> List[Transaction]:
        """Filter by type and order the transactions for display.

        Args:
            kind: 'all', 'income' or 'expense'
            sort_by: 'insertion' (newest added first), 'date' (latest
                date first) or 'amount' (largest first)
        """
        if kind not in TRANSACTION_FILTERS:
            raise ValueError(f"Unsupported filter '{kind}'. Expected one of {TRANSACTION_FILTERS}")
        if sort_by not in TRANSACTION_SORTS:
            raise ValueError(f"Unsupported sort '{sort_by}'. Expected one of {TRANSACTION_SORTS}")

        selected = [t for t in self._state.transactions if kind == 'all' or t.type == kind]
        if sort_by == 'date':
            selected.sort(key=lambda t: t.date, reverse=True)
        elif sort_by == 'amount':
            selected.sort(key=lambda t: t.amount, reverse=True)
        return selected
