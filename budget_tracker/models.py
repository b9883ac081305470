"""Data classes for transactions, budgets and the persisted store state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Transaction:
    """A single recorded income or expense event."""
    id: str
    type: str  # 'income' or 'expense'
    amount: float
    category: str
    description: str
    date: str  # YYYY-MM-DD

    @property
    def is_income(self) -> bool:
        return self.type == 'income'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'type': self.type,
            'amount': self.amount,
            'category': self.category,
            'description': self.description,
            'date': self.date,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Transaction':
        return cls(
            id=str(data['id']),
            type=str(data['type']),
            amount=float(data['amount']),
            category=str(data['category']),
            description=str(data['description']),
            date=str(data['date']),
        )


@dataclass(frozen=True)
class Budget:
    """A monthly spending ceiling for one category.

    ``spent`` is the expense total recorded when the budget was last set.
    It goes stale as transactions change; live figures come from
    :meth:`budget_tracker.store.BudgetStore.get_budgets_with_progress`.
    """
    category: str
    limit: float
    spent: float = 0.0

    @property
    def over_limit(self) -> bool:
        return self.spent > self.limit

    def to_dict(self) -> Dict[str, Any]:
        return {
            'category': self.category,
            'limit': self.limit,
            'spent': self.spent,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Budget':
        return cls(
            category=str(data['category']),
            limit=float(data['limit']),
            spent=float(data.get('spent', 0.0)),
        )


@dataclass
class BudgetState:
    """Everything the store persists: transactions newest first, budgets in insertion order."""
    transactions: List[Transaction] = field(default_factory=list)
    budgets: List[Budget] = field(default_factory=list)

    @classmethod
    def empty(cls) -> 'BudgetState':
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'transactions': [t.to_dict() for t in self.transactions],
            'budgets': [b.to_dict() for b in self.budgets],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'BudgetState':
        return cls(
            transactions=[Transaction.from_dict(t) for t in data.get('transactions', [])],
            budgets=[Budget.from_dict(b) for b in data.get('budgets', [])],
        )
