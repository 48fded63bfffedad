"""Live rate refresh endpoint.

Provides the CoinGecko client, SQLite persistence for current rates and
history, the refresh pipeline, and the HTTP handler that exposes it.
"""

from cryptocourse.rates.database import RatesDatabase
from cryptocourse.rates.provider import CoinGeckoClient
from cryptocourse.rates.refresher import RateRefresher, build_exchange_rate
from cryptocourse.rates.store import RatesStore

__all__ = [
    "CoinGeckoClient",
    "RateRefresher",
    "RatesDatabase",
    "RatesStore",
    "build_exchange_rate",
]
