"""Validation of untrusted transaction and budget input.

Both validators collect every violated constraint rather than stopping
at the first, so the caller can show a single message listing all of
them. They never touch storage and return a normalized copy of the
input: trimmed strings and a float amount. Feeding that copy back in
returns it unchanged.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .config import MAX_AMOUNT, MAX_CATEGORY_LENGTH, MAX_DESCRIPTION_LENGTH
from .errors import ValidationError
from .vocabulary import TRANSACTION_TYPES

DATE_PATTERN = re.compile(r'[0-9]{4}-[0-9]{2}-[0-9]{2}')


def _parse_number(value: Any) -> Optional[float]:
    """Parse ``value`` into a finite float, or return None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _check_amount(value: Any, label: str) -> Tuple[Optional[float], List[str]]:
    number = _parse_number(value)
    if number is None:
        return None, [f"{label} must be a number"]
    if number <= 0:
        return number, [f"{label} must be positive"]
    if number > MAX_AMOUNT:
        return number, [f"{label} too large"]
    return number, []


def _check_text(value: Any, max_length: int, required: str, too_long: str) -> Tuple[str, List[str]]:
    text = value.strip() if isinstance(value, str) else ''
    if not text:
        return text, [required]
    if len(text) > max_length:
        return text, [too_long]
    return text, []


def _category(data: Mapping[str, Any]) -> Tuple[str, List[str]]:
    return _check_text(
        data.get('category'),
        MAX_CATEGORY_LENGTH,
        "Category is required",
        "Category too long",
    )


def transaction_errors(data: Mapping[str, Any]) -> List[str]:
    """Return every constraint ``data`` violates as a transaction (empty if valid)."""
    try:
        validate_transaction(data)
    except ValidationError as exc:
        return exc.errors
    return []


def budget_errors(data: Mapping[str, Any]) -> List[str]:
    """Return every constraint ``data`` violates as a budget (empty if valid)."""
    try:
        validate_budget(data)
    except ValidationError as exc:
        return exc.errors
    return []


def validate_transaction(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate and normalize transaction fields.

    Args:
        data: Mapping with ``type``, ``amount``, ``category``,
            ``description`` and ``date``. Extra keys (such as ``id``) are
            ignored.

    Returns:
        Normalized dictionary with exactly those five keys

    Raises:
        ValidationError: listing every violated constraint

    Example:
        >>> validate_transaction({'type': 'expense', 'amount': '12.5',
        ...     'category': ' Shopping ', 'description': 'Socks', 'date': '2024-03-01'})
        {'type': 'expense', 'amount': 12.5, 'category': 'Shopping', 'description': 'Socks', 'date': '2024-03-01'}
    """
    errors: List[str] = []

    t_type = data.get('type')
    if t_type not in TRANSACTION_TYPES:
        errors.append("Type must be 'income' or 'expense'")

    amount, amount_errors = _check_amount(data.get('amount'), "Amount")
    errors.extend(amount_errors)

    category, category_errors = _category(data)
    errors.extend(category_errors)

    description, description_errors = _check_text(
        data.get('description'),
        MAX_DESCRIPTION_LENGTH,
        "Description is required",
        f"Description must be less than {MAX_DESCRIPTION_LENGTH} characters",
    )
    errors.extend(description_errors)

    t_date = data.get('date')
    if not isinstance(t_date, str) or not DATE_PATTERN.fullmatch(t_date):
        errors.append("Invalid date format")

    if errors:
        raise ValidationError(errors)

    return {
        'type': t_type,
        'amount': amount,
        'category': category,
        'description': description,
        'date': t_date,
    }


def validate_budget(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate and normalize budget fields (``category`` and ``limit``).

    Raises:
        ValidationError: listing every violated constraint
    """
    errors: List[str] = []

    category, category_errors = _category(data)
    errors.extend(category_errors)

    limit, limit_errors = _check_amount(data.get('limit'), "Limit")
    errors.extend(limit_errors)

    if errors:
        raise ValidationError(errors)

    return {'category': category, 'limit': limit}
