"""Display currency preference and amount formatting.

The selected currency code lives in its own storage slot, separate from
the budget data. Amounts are never converted, only prefixed with the
currency symbol.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from .config import CURRENCY_STORAGE_KEY
from .storage import LocalStorage
from .vocabulary import get_config_value


@dataclass(frozen=True)
class Currency:
    code: str
    symbol: str
    name: str


def load_currencies() -> List[Currency]:
    return [Currency(**entry) for entry in get_config_value('currencies', default=[])]


CURRENCIES: List[Currency] = load_currencies()
CURRENCIES_BY_CODE: Dict[str, Currency] = {c.code: c for c in CURRENCIES}
DEFAULT_CURRENCY_CODE: str = get_config_value('default_currency', default='USD')


def get_currency(code: Optional[str]) -> Currency:
    """Look up a currency by code, falling back to the default currency."""
    if code in CURRENCIES_BY_CODE:
        return CURRENCIES_BY_CODE[code]
    return CURRENCIES_BY_CODE.get(DEFAULT_CURRENCY_CODE, CURRENCIES[0])


def format_amount(amount: Union[float, int], currency: Optional[Currency] = None) -> str:
    """Prefix ``amount`` with the currency symbol, rounded to two decimals.

    Example:
        >>> format_amount(1234.5)
        '$1234.50'
    """
    currency = currency or get_currency(DEFAULT_CURRENCY_CODE)
    return f"{currency.symbol}{float(amount):.2f}"


class CurrencyPreference:
    """The user's display currency, persisted as a bare currency code."""

    def __init__(self, local_storage: Optional[LocalStorage] = None, key: str = CURRENCY_STORAGE_KEY):
        self.local_storage = local_storage or LocalStorage()
        self.key = key
        self.currency = self._load()

    def _load(self) -> Currency:
        try:
            stored = self.local_storage.get_item(self.key)
        except OSError:
            stored = None
        return get_currency(stored.strip() if stored else None)

    def set_currency(self, code: str) -> Currency:
        """Select and persist a currency. Unknown codes select the default.

        Raises:
            OSError: If the preference cannot be written
        """
        self.currency = get_currency(code)
        self.local_storage.set_item(self.key, self.currency.code)
        return self.currency

    def format_amount(self, amount: Union[float, int]) -> str:
        return format_amount(amount, self.currency)
