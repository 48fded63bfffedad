"""Display formatting for prices and 24h changes on the landing page.

Ties round half away from zero, the way the page has always shown them
("$3.13" for 3.125), not banker's rounding.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

_THOUSAND = Decimal("1000")
_ONE = Decimal("1")
_CENTS = Decimal("0.01")
_SUB_CENTS = Decimal("0.0001")


def _as_decimal(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _round(value: Decimal, step: Decimal) -> Decimal:
    return value.quantize(step, rounding=ROUND_HALF_UP)


def format_price(value: Any) -> str:
    """Format a USD price for display.

    >= 1000: thousands separators, 2 decimals ("$45,000.50")
    1..1000: 2 decimals ("$3.10")
    < 1:     4 decimals ("$0.0032")
    """
    price = _as_decimal(value)
    if price >= _THOUSAND:
        return f"${_round(price, _CENTS):,.2f}"
    if price >= _ONE:
        return f"${_round(price, _CENTS):.2f}"
    return f"${_round(price, _SUB_CENTS):.4f}"


def is_positive(value: Any) -> bool:
    """Zero counts as positive (no loss)."""
    return _as_decimal(value) >= 0


def format_change(value: Any) -> str:
    """Signed percentage with 2 decimals, e.g. "+2.35%" or "-0.80%"."""
    change = _as_decimal(value)
    sign = "+" if is_positive(change) else ""
    return f"{sign}{_round(change, _CENTS):.2f}%"


def change_class(value: Any) -> str:
    return "positive" if is_positive(value) else "negative"
