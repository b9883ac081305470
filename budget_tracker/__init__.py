"""Top‑level package for the Budget Tracker.

The primary modules are:

* ``store`` – the transaction/budget store and its derived figures
* ``validation`` – checks for untrusted transaction and budget input
* ``storage`` – local key/value slots and the state persistence adapter
* ``analytics`` – pandas aggregations behind the store's reads
* ``currency`` – display currency preference and amount formatting
* ``dashboard`` – a Streamlit app that ties everything together

To run the dashboard from the command line you can execute:

```bash
streamlit run budget_tracker/dashboard.py
```
"""

from .errors import (  # noqa: F401
    BudgetTrackerError,
    PersistenceReadError,
    PersistenceWriteError,
    PersistenceWriteWarning,
    ValidationError,
)
from .models import Budget, BudgetState, Transaction  # noqa: F401
from .storage import BudgetStorage, LocalStorage  # noqa: F401
from .store import BudgetStore  # noqa: F401
from .validation import validate_budget, validate_transaction  # noqa: F401

__all__ = [
    "Budget",
    "BudgetState",
    "BudgetStorage",
    "BudgetStore",
    "BudgetTrackerError",
    "LocalStorage",
    "PersistenceReadError",
    "PersistenceWriteError",
    "PersistenceWriteWarning",
    "Transaction",
    "ValidationError",
    "validate_budget",
    "validate_transaction",
]
