"""Currencies the site can display prices in."""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Currency:
    code: str
    symbol: str
    name: str
    country: str


CURRENCIES: List[Currency] = [
    Currency(code="USD", symbol="$", name="Dollar", country="United States"),
    Currency(code="EUR", symbol="€", name="Euro", country="Eurozone"),
    Currency(code="GBP", symbol="£", name="Pound", country="United Kingdom"),
    Currency(code="JPY", symbol="¥", name="Yen", country="Japan"),
    Currency(code="CAD", symbol="$", name="Dollar", country="Canada"),
    Currency(code="AUD", symbol="$", name="Dollar", country="Australia"),
    Currency(code="INR", symbol="₹", name="Rupee", country="India"),
]

_BY_CODE = {c.code: c for c in CURRENCIES}


def get_currency_by_code(code: Optional[str]) -> Optional[Currency]:
    if not code:
        return None
    return _BY_CODE.get(code.upper())
