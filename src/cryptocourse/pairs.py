"""Static mapping from CoinGecko coin IDs to internal trading-pair symbols.

Loaded once at import and exposed read-only. The refresh endpoint only
persists assets that appear here; anything else the provider returns is
ignored.
"""

from decimal import Decimal
from types import MappingProxyType
from typing import Mapping

COINGECKO_TO_PAIR: Mapping[str, str] = MappingProxyType({
    "bitcoin": "BTC-USD",
    "ethereum": "ETH-USD",
    "tether": "USDT-USD",
    "binancecoin": "BNB-USD",
    "solana": "SOL-USD",
    "ripple": "XRP-USD",
    "cardano": "ADA-USD",
    "dogecoin": "DOGE-USD",
    "tron": "TRX-USD",
    "litecoin": "LTC-USD",
})

TRACKED_ASSET_IDS: tuple[str, ...] = tuple(COINGECKO_TO_PAIR)

# Synthetic 24h range around spot; the simple price endpoint has no high/low
HIGH_24H_FACTOR = Decimal("1.02")
LOW_24H_FACTOR = Decimal("0.98")


def pair_for_asset(asset_id: str) -> str | None:
    """Return the pair symbol for a CoinGecko id, or None if untracked."""
    return COINGECKO_TO_PAIR.get(asset_id)
