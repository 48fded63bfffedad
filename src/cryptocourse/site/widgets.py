"""View models for the live price hero card.

The card is a set of optional text targets. A page variant without one
of them simply has that target set to None and the update skips it.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Mapping

from cryptocourse.site.formatting import change_class, format_change, format_price

PLACEHOLDER = "—"


@dataclass
class TextTarget:
    """One rendered element: its text and CSS class list."""

    text: str = PLACEHOLDER
    css_class: str = ""


@dataclass
class HeroCard:
    """Featured pair card: pair label, price line and 24h change badge."""

    price: TextTarget | None = field(
        default_factory=lambda: TextTarget(css_class="chart-price")
    )
    change: TextTarget | None = field(
        default_factory=lambda: TextTarget(css_class="chart-change")
    )
    pair: str = "BTC-USD"

    @property
    def label(self) -> str:
        """Display form of the pair, e.g. "BTC / USD"."""
        return self.pair.replace("-", " / ")


def find_rate(rates: Iterable[Mapping[str, Any]], pair: str) -> Mapping[str, Any] | None:
    """Return the rate row for pair, or None."""
    for rate in rates:
        if rate.get("pair") == pair:
            return rate
    return None


def update_hero_card(
    card: HeroCard, rates: Iterable[Mapping[str, Any]], pair: str | None = None
) -> bool:
    """Apply the row for pair (default: the card's own pair) to the card.

    Returns False (card untouched) when the pair is absent from rates.
    """
    rate = find_rate(rates, pair or card.pair)
    if rate is None:
        return False

    price = Decimal(str(rate["price"]))
    change = Decimal(str(rate.get("price_change_24h") or 0))
    cls = change_class(change)

    if card.price is not None:
        card.price.text = format_price(price)
        card.price.css_class = f"chart-price {cls}"

    if card.change is not None:
        card.change.text = format_change(change)
        card.change.css_class = f"chart-change {cls}"

    return True
