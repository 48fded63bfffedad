"""Shared test fixtures for the course site."""

import copy
from decimal import Decimal

import pytest
import pytest_asyncio

from cryptocourse.config import AppSettings, DatabaseSettings, PageSettings, ServiceSettings
from cryptocourse.models import ProviderQuote
from cryptocourse.rates.database import RatesDatabase
from cryptocourse.rates.provider import parse_quote
from cryptocourse.rates.store import RatesStore

# Mimics CoinGecko /simple/price for all ten tracked coins
PROVIDER_PAYLOAD = {
    "bitcoin": {"usd": 45000.5, "usd_24h_change": 2.345, "usd_24h_vol": 31000000000, "usd_market_cap": 880000000000},
    "ethereum": {"usd": 2400.1, "usd_24h_change": -1.2, "usd_24h_vol": 15000000000, "usd_market_cap": 290000000000},
    "tether": {"usd": 1.0, "usd_24h_change": 0.01, "usd_24h_vol": 50000000000, "usd_market_cap": 95000000000},
    "binancecoin": {"usd": 310.4, "usd_24h_change": 0.5, "usd_24h_vol": 900000000, "usd_market_cap": 47000000000},
    "solana": {"usd": 98.7, "usd_24h_change": 4.1, "usd_24h_vol": 2100000000, "usd_market_cap": 42000000000},
    "ripple": {"usd": 0.5123, "usd_24h_change": -0.3, "usd_24h_vol": 1200000000, "usd_market_cap": 27000000000},
    "cardano": {"usd": 0.4821, "usd_24h_change": 1.1, "usd_24h_vol": 400000000, "usd_market_cap": 17000000000},
    "dogecoin": {"usd": 0.0812, "usd_24h_change": -2.2, "usd_24h_vol": 600000000, "usd_market_cap": 11000000000},
    "tron": {"usd": 0.1034, "usd_24h_change": 0.0, "usd_24h_vol": 300000000, "usd_market_cap": 9000000000},
    "litecoin": {"usd": 69.9, "usd_24h_change": None, "usd_24h_vol": None, "usd_market_cap": None},
}


@pytest.fixture
def provider_payload() -> dict:
    """A fresh copy of the ten-coin provider response."""
    return copy.deepcopy(PROVIDER_PAYLOAD)


@pytest.fixture
def mock_settings(tmp_path) -> AppSettings:
    """Return AppSettings with a temporary database and dummy service credentials."""
    return AppSettings(
        log_level="DEBUG",
        database=DatabaseSettings(path=str(tmp_path / "rates.db")),
        service=ServiceSettings(
            url="http://testserver",
            access_key="test-anon-key",  # type: ignore[arg-type]
        ),
        page=PageSettings(),
    )


@pytest.fixture
def provider_quotes(provider_payload: dict) -> dict[str, ProviderQuote]:
    """Provider payload parsed the way CoinGeckoClient parses it."""
    return {asset_id: parse_quote(info) for asset_id, info in provider_payload.items()}


@pytest_asyncio.fixture
async def rates_store(tmp_path):
    """RatesStore over a fresh SQLite file."""
    async with RatesDatabase(str(tmp_path / "rates.db")) as database:
        yield RatesStore(database)


@pytest.fixture
def make_rate_row():
    """Factory for rate rows as returned by the refresh endpoint."""

    def _make(pair: str = "BTC-USD", price: str = "45000.5", change: str = "2.345") -> dict:
        price_d = Decimal(price)
        return {
            "id": f"id-{pair}",
            "pair": pair,
            "price": price,
            "price_change_24h": change,
            "volume_24h": "1000",
            "high_24h": str(price_d * Decimal("1.02")),
            "low_24h": str(price_d * Decimal("0.98")),
            "market_cap": "0",
            "last_updated": "2026-10-19T12:00:00.000Z",
        }

    return _make
