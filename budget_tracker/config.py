"""Configuration management for the budget tracker.

This module centralizes all configuration values including paths,
storage keys, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base project root - assumes this file is in budget_tracker/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directory holding one file per storage slot
DATA_DIR = Path(os.getenv("BUDGET_TRACKER_DATA_DIR", _PROJECT_ROOT / "data"))

# Storage slot keys
STORAGE_KEY = "budget-tracker-data"
CURRENCY_STORAGE_KEY = "budget-tracker-currency"

# Vocabulary file shipped with the package
VOCABULARY_PATH = Path(__file__).parent / "vocabulary.json"

# Field limits shared by validation
MAX_AMOUNT = 999_999_999
MAX_CATEGORY_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500

