"""
Currency exchange with static USD-relative fallback rates.

The rates are informational only; nothing here claims conversion accuracy.
"""
import logging
from decimal import Decimal
from typing import Dict, List, Optional

from fintrack.core.errors import ValidationError
from fintrack.models.common import to_money

logger = logging.getLogger(__name__)

# Units of each currency per one USD
FALLBACK_RATES: Dict[str, Decimal] = {
    "USD": Decimal("1"),
    "EUR": Decimal("0.85"),
    "GBP": Decimal("0.73"),
    "JPY": Decimal("110.0"),
    "CAD": Decimal("1.35"),
    "AUD": Decimal("1.45"),
    "CHF": Decimal("0.88"),
    "CNY": Decimal("7.2"),
    "INR": Decimal("75.0"),
    "BRL": Decimal("5.2"),
}

CURRENCIES: List[Dict[str, str]] = [
    {"code": "USD", "symbol": "$", "name": "US Dollar"},
    {"code": "EUR", "symbol": "€", "name": "Euro"},
    {"code": "GBP", "symbol": "£", "name": "British Pound"},
    {"code": "JPY", "symbol": "¥", "name": "Japanese Yen"},
    {"code": "CAD", "symbol": "C$", "name": "Canadian Dollar"},
    {"code": "AUD", "symbol": "A$", "name": "Australian Dollar"},
    {"code": "CHF", "symbol": "Fr", "name": "Swiss Franc"},
    {"code": "CNY", "symbol": "¥", "name": "Chinese Yuan"},
    {"code": "INR", "symbol": "₹", "name": "Indian Rupee"},
    {"code": "BRL", "symbol": "R$", "name": "Brazilian Real"},
]


class CurrencyExchangeService:
    def __init__(self, rates: Optional[Dict[str, Decimal]] = None) -> None:
        self._rates = dict(rates or FALLBACK_RATES)

    def is_supported(self, code: str) -> bool:
        return code in self._rates

    def supported_currencies(self) -> List[str]:
        return list(self._rates)

    def currencies(self) -> List[Dict[str, str]]:
        return [c for c in CURRENCIES if c["code"] in self._rates]

    def validate(self, code: str, field: str = "currency") -> str:
        if not self.is_supported(code):
            raise ValidationError.for_field(field, f"Unsupported currency: {code}")
        return code

    def get_exchange_rate(self, from_currency: str, to_currency: str = "USD") -> Decimal:
        if from_currency == to_currency:
            return Decimal("1")
        self.validate(from_currency, "from_currency")
        self.validate(to_currency, "to_currency")
        # from -> USD -> to
        return self._rates[to_currency] / self._rates[from_currency]

    def convert(self, amount: Decimal, from_currency: str, to_currency: str = "USD") -> Decimal:
        if from_currency == to_currency:
            return to_money(amount)
        return to_money(Decimal(amount) * self.get_exchange_rate(from_currency, to_currency))
