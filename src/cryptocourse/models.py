"""Data models shared by the rate refresh endpoint and the landing page.

CRITICAL: All monetary values use Decimal. Never use float for prices, volumes, or caps.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Mapping, Sequence

from cryptocourse.exceptions import LeadValidationError

NO_INTERESTS_MESSAGE = "Пожалуйста, выберите хотя бы один вариант обучения"


def utc_now_iso(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a 'Z' suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """Convert a JSON number/string to Decimal, mapping None and "" to default."""
    if value is None or value == "":
        return default
    return Decimal(str(value))


@dataclass
class ExchangeRate:
    """Current rate for one trading pair (one row per pair).

    Stored in SQLite with every monetary field as TEXT to preserve Decimal precision.
    """

    pair: str
    price: Decimal
    price_change_24h: Decimal
    volume_24h: Decimal
    high_24h: Decimal
    low_24h: Decimal
    market_cap: Decimal
    last_updated: str
    id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "pair": self.pair,
            "price": str(self.price),
            "price_change_24h": str(self.price_change_24h),
            "volume_24h": str(self.volume_24h),
            "high_24h": str(self.high_24h),
            "low_24h": str(self.low_24h),
            "market_cap": str(self.market_cap),
            "last_updated": self.last_updated,
        }


@dataclass
class RateHistoryEntry:
    """One append-only price observation."""

    pair: str
    price: Decimal
    timestamp: str


@dataclass
class ProviderQuote:
    """A single CoinGecko simple-price entry.

    Change, volume and market cap are zero when the provider omits them.
    """

    usd: Decimal
    usd_24h_change: Decimal = Decimal("0")
    usd_24h_vol: Decimal = Decimal("0")
    usd_market_cap: Decimal = Decimal("0")


@dataclass
class RefreshResult:
    """Outcome of one rate refresh: the pairs written and the rows read back."""

    updated: list[str]
    rates: list[ExchangeRate]
    timestamp: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "updated": list(self.updated),
            "rates": [rate.to_dict() for rate in self.rates],
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class LeadFormData:
    """A lead captured from the landing page form. Forwarded once, never stored."""

    name: str
    email: str
    phone: str
    experience: str
    interests: tuple[str, ...]
    message: str | None = None

    @classmethod
    def from_form(
        cls, fields: Mapping[str, Any], interests: Sequence[str]
    ) -> "LeadFormData":
        """Build a lead from submitted form fields.

        Raises:
            LeadValidationError: If no interest was selected.
        """
        selected = tuple(str(i) for i in interests if str(i).strip())
        if not selected:
            raise LeadValidationError(NO_INTERESTS_MESSAGE)
        message = str(fields.get("message") or "").strip()
        return cls(
            name=str(fields.get("name") or ""),
            email=str(fields.get("email") or ""),
            phone=str(fields.get("phone") or ""),
            experience=str(fields.get("experience") or ""),
            interests=selected,
            message=message or None,
        )

    def to_relay_payload(self) -> dict[str, str]:
        """JSON body for the spreadsheet relay (interests joined into one string)."""
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "experience": self.experience,
            "interests": ", ".join(self.interests),
            "message": self.message or "",
        }
