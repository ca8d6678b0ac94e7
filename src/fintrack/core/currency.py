#!/usr/bin/env python3
"""
Amount Parsing and Formatting Utilities

All amounts are handled as Decimal values so sums and dedup comparisons use
exact arithmetic. Floats are only produced for percentages.

Key Principles:
- Never use floating-point arithmetic for amount sums
- Parsing never guesses: text that does not reduce to a number is rejected
- Signs are preserved (negative = expense, positive = income)
"""

import logging
import re
from collections.abc import Iterable
from decimal import Decimal, InvalidOperation

from .refresh import RefreshBus, RefreshEvent

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

DEFAULT_CURRENCY_CODE = "USD"
DEFAULT_CURRENCY_SYMBOL = "$"

_NON_NUMERIC = re.compile(r"[^\d.\-]")


def clean_amount_text(raw: str) -> str:
    """
    Strip every character that is not a digit, minus sign, or decimal point.

    Examples:
        clean_amount_text("¥1,234.56") -> "1234.56"
        clean_amount_text("-$45.99") -> "-45.99"
    """
    return _NON_NUMERIC.sub("", raw or "")


def parse_amount(raw: str) -> Decimal:
    """
    Parse an amount from raw export text.

    Currency symbols, thousands separators and whitespace are discarded before
    conversion.

    Args:
        raw: Amount text like '¥1,234.56', '-45.99' or '1 200'

    Returns:
        Signed Decimal amount

    Raises:
        ValueError: If nothing numeric remains or the remainder is malformed
    """
    cleaned = clean_amount_text(raw)
    if not cleaned:
        raise ValueError(f"No numeric content in amount '{raw}'")
    try:
        amount = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Malformed amount '{raw}'") from e
    if not amount.is_finite():
        raise ValueError(f"Non-finite amount '{raw}'")
    return amount


def to_decimal(value: object) -> Decimal:
    """
    Convert a numeric value to Decimal without coercing text.

    Floats go through their shortest repr so 5000.0 becomes Decimal('5000.0').

    Raises:
        TypeError: If value is not an int, float or Decimal (bool is rejected)
        ValueError: If value is NaN or infinite
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise TypeError(f"Amount must be numeric, got {type(value).__name__}")
    result = value if isinstance(value, Decimal) else Decimal(str(value))
    if not result.is_finite():
        raise ValueError(f"Amount must be finite, got {value}")
    return result


def sum_amounts(amounts: Iterable[Decimal]) -> Decimal:
    """Sum amounts starting from Decimal zero."""
    return sum(amounts, ZERO)


def safe_percentage(part: Decimal, whole: Decimal) -> float:
    """
    Calculate part / whole * 100 as a float.

    Returns 0.0 when whole is zero or negative, so callers never see a
    ZeroDivisionError or NaN.
    """
    if whole <= 0:
        return 0.0
    return float(part / whole * 100)


def format_amount(amount: Decimal, symbol: str = DEFAULT_CURRENCY_SYMBOL) -> str:
    """
    Format an amount with two decimal places and a currency symbol.

    Examples:
        format_amount(Decimal("1234.5")) -> "$1,234.50"
        format_amount(Decimal("-45.99"), "¥") -> "-¥45.99"
    """
    quantized = amount.quantize(Decimal("0.01"))
    sign = "-" if quantized < 0 else ""
    return f"{sign}{symbol}{abs(quantized):,.2f}"


class CurrencySettings:
    """
    Display currency for a ledger.

    Only the code and symbol shown to the user change; stored amounts are
    never converted. A change publishes RefreshEvent.CURRENCY so read-models
    re-render their figures.
    """

    def __init__(
        self,
        bus: RefreshBus | None = None,
        code: str = DEFAULT_CURRENCY_CODE,
        symbol: str = DEFAULT_CURRENCY_SYMBOL,
    ):
        self.bus = bus
        self.code, self.symbol = _clean_currency(code, symbol)

    def set_currency(self, code: str, symbol: str) -> bool:
        """
        Switch the display currency.

        Returns:
            True if the code or symbol changed (and CURRENCY was published)

        Raises:
            ValueError: If code or symbol is empty
        """
        code, symbol = _clean_currency(code, symbol)
        if (code, symbol) == (self.code, self.symbol):
            return False

        self.code, self.symbol = code, symbol
        logger.info("Display currency set to %s (%s)", code, symbol)
        if self.bus is not None:
            self.bus.publish(RefreshEvent.CURRENCY)
        return True

    def format(self, amount: Decimal) -> str:
        return format_amount(amount, self.symbol)


def _clean_currency(code: str, symbol: str) -> tuple[str, str]:
    code = (code or "").strip().upper()
    symbol = (symbol or "").strip()
    if not code:
        raise ValueError("Currency code must not be empty")
    if not symbol:
        raise ValueError("Currency symbol must not be empty")
    return code, symbol
