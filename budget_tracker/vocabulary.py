"""Loader for the fixed category and currency vocabularies.

The vocabularies are stored in ``vocabulary.json`` next to this module so
they can be edited without code changes. Validation does not enforce
them; the dashboard uses them to populate its select boxes.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import VOCABULARY_PATH

TRANSACTION_TYPES = ("income", "expense")


@lru_cache(maxsize=None)
def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the vocabulary configuration file.

    Args:
        path: Optional path to an alternative vocabulary file

    Returns:
        Dictionary containing the configuration

    Raises:
        FileNotFoundError: If the configuration file doesn't exist
        json.JSONDecodeError: If the configuration file is invalid JSON
    """
    config_path = path or VOCABULARY_PATH

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def get_config_value(*keys: str, default: Any = None) -> Any:
    """Get a nested configuration value by key path.

    Example:
        >>> get_config_value('default_currency')
        'USD'
    """
    try:
        value = load_config()
        for key in keys:
            value = value[key]
        return value
    except (KeyError, IndexError, FileNotFoundError):
        return default


def expense_categories() -> List[str]:
    return list(get_config_value('expense_categories', default=[]))


def income_categories() -> List[str]:
    return list(get_config_value('income_categories', default=[]))


def categories_for(transaction_type: str) -> List[str]:
    """Return the category vocabulary for ``income`` or ``expense``."""
    if transaction_type == 'income':
        return income_categories()
    return expense_categories()
