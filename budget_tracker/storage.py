"""Local key/value storage and the budget state persistence adapter.

Each storage slot is a single file in the data directory. The budget
state is written as one JSON document on every store mutation and read
back once at startup. Missing or corrupt data is treated as an empty
state rather than an error.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import DATA_DIR, STORAGE_KEY
from .errors import PersistenceReadError, PersistenceWriteError
from .models import BudgetState
from .vocabulary import TRANSACTION_TYPES

_TRANSACTION_FIELDS = {
    'id': str,
    'type': str,
    'amount': (int, float),
    'category': str,
    'description': str,
    'date': str,
}
_BUDGET_FIELDS = {
    'category': str,
    'limit': (int, float),
    'spent': (int, float),
}
_ALLOWED_VALUES = {
    'type': TRANSACTION_TYPES,
}


def safe_filename(name: str, default: str = 'slot') -> str:
    """Create a safe filename from a storage key.

    Keeps alphanumerics, underscores and hyphens; spaces become
    underscores.

    Example:
        >>> safe_filename("budget-tracker-data")
        'budget-tracker-data'
        >>> safe_filename("my key!")
        'my_key'
    """
    if not name:
        return default

    cleaned = ''.join(c for c in name if c.isalnum() or c in {' ', '_', '-'})
    cleaned = cleaned.strip().replace(' ', '_')

    while '__' in cleaned:
        cleaned = cleaned.replace('__', '_')

    cleaned = cleaned.rstrip('_')

    return cleaned if cleaned else default


class LocalStorage:
    """String slots keyed by name, one file per key."""

    def __init__(self, directory: Optional[Path] = None):
        """Initialize local storage.

        Args:
            directory: Optional custom directory for slot files.
                       Defaults to DATA_DIR from config.
        """
        self.directory = Path(directory) if directory is not None else DATA_DIR

    def get_path(self, key: str) -> Path:
        return self.directory / f"{safe_filename(key)}.json"

    def get_item(self, key: str) -> Optional[str]:
        """Return the stored string for ``key`` or None if the slot is empty.

        Raises:
            OSError: If the slot exists but cannot be read
        """
        target = self.get_path(key)
        if not target.exists():
            return None
        return target.read_text(encoding='utf-8')

    def set_item(self, key: str, value: str) -> None:
        """Overwrite the slot for ``key``.

        Raises:
            OSError: If the directory or file cannot be written
        """
        target = self.get_path(key)
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open('w', encoding='utf-8') as handle:
            handle.write(value)

    def remove_item(self, key: str) -> None:
        target = self.get_path(key)
        if not target.exists():
            return  # Silently ignore non-existent slots
        target.unlink()


def _check_records(records: Any, fields: Dict[str, Any], label: str) -> List[Dict[str, Any]]:
    if not isinstance(records, list):
        raise PersistenceReadError(f"'{label}' must be a list")
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise PersistenceReadError(f"{label}[{index}] is not an object")
        for name, expected in fields.items():
            value = record.get(name)
            if isinstance(value, bool) or not isinstance(value, expected):
                raise PersistenceReadError(f"{label}[{index}].{name} has the wrong type")
            if isinstance(value, float) and not math.isfinite(value):
                raise PersistenceReadError(f"{label}[{index}].{name} is not a finite number")
            if name in _ALLOWED_VALUES and value not in _ALLOWED_VALUES[name]:
                raise PersistenceReadError(f"{label}[{index}].{name} has an unknown value {value!r}")
    return records


def parse_state(raw: str) -> BudgetState:
    """Parse a stored document into a :class:`BudgetState`.

    Raises:
        PersistenceReadError: If the text is not JSON or does not match the schema
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise PersistenceReadError(f"Stored budget data is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise PersistenceReadError("Stored budget data is not an object")

    _check_records(data.get('transactions'), _TRANSACTION_FIELDS, 'transactions')
    _check_records(data.get('budgets'), _BUDGET_FIELDS, 'budgets')
    return BudgetState.from_dict(data)


class BudgetStorage:
    """Round-trips the full budget state through a single storage slot."""

    def __init__(self, local_storage: Optional[LocalStorage] = None, key: str = STORAGE_KEY):
        self.local_storage = local_storage or LocalStorage()
        self.key = key

    def load(self) -> BudgetState:
        """Load the stored state.

        Returns:
            The stored state, or an empty state if the slot is missing,
            unreadable or does not match the expected schema
        """
        try:
            raw = self.local_storage.get_item(self.key)
        except OSError:
            return BudgetState.empty()
        if raw is None:
            return BudgetState.empty()

        try:
            return parse_state(raw)
        except PersistenceReadError:
            return BudgetState.empty()

    def save(self, state: BudgetState) -> None:
        """Serialize the whole state and overwrite the slot.

        Raises:
            PersistenceWriteError: If the slot cannot be written or the
                state holds a non-finite number, which JSON cannot represent
        """
        try:
            payload = json.dumps(state.to_dict(), indent=2, ensure_ascii=False, allow_nan=False)
        except ValueError as e:
            raise PersistenceWriteError(f"Budget data cannot be stored as JSON: {e}") from e
        try:
            self.local_storage.set_item(self.key, payload)
        except OSError as e:
            raise PersistenceWriteError(
                f"Failed to save budget data to {self.local_storage.get_path(self.key)}: {e}"
            ) from e
