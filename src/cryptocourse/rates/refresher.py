"""Rate refresh pipeline: provider fetch, per-pair upsert, history append, read-back.

Failure policy:
- Provider errors abort the whole refresh (UpstreamError propagates).
- A rejected upsert drops that pair from `updated`; remaining pairs continue.
- A rejected history batch is logged only.
- A failed read-back propagates.
Nothing is rolled back and nothing is retried.
"""

from datetime import datetime, timezone
from typing import Protocol

from cryptocourse.exceptions import PersistenceError
from cryptocourse.logging import get_logger
from cryptocourse.models import (
    ExchangeRate,
    ProviderQuote,
    RateHistoryEntry,
    RefreshResult,
    utc_now_iso,
)
from cryptocourse.pairs import HIGH_24H_FACTOR, LOW_24H_FACTOR, TRACKED_ASSET_IDS, pair_for_asset

logger = get_logger(__name__)


class PriceProvider(Protocol):
    async def fetch_prices(
        self, asset_ids: list[str] | tuple[str, ...]
    ) -> dict[str, ProviderQuote]: ...


class RateWriter(Protocol):
    async def upsert_rate(self, rate: ExchangeRate) -> None: ...

    async def insert_history(self, entries: list[RateHistoryEntry]) -> int: ...

    async def get_rates(self) -> list[ExchangeRate]: ...


def build_exchange_rate(pair: str, quote: ProviderQuote, last_updated: str) -> ExchangeRate:
    """Build the current-rate row for a pair, deriving high/low as +/-2% of spot."""
    return ExchangeRate(
        pair=pair,
        price=quote.usd,
        price_change_24h=quote.usd_24h_change,
        volume_24h=quote.usd_24h_vol,
        high_24h=quote.usd * HIGH_24H_FACTOR,
        low_24h=quote.usd * LOW_24H_FACTOR,
        market_cap=quote.usd_market_cap,
        last_updated=last_updated,
    )


class RateRefresher:
    """Runs one refresh against a price provider and a rate store.

    Holds no state between calls; concurrent refreshes only share the
    provider's HTTP client and the store's connection.
    """

    def __init__(
        self,
        provider: PriceProvider,
        store: RateWriter,
        asset_ids: tuple[str, ...] = TRACKED_ASSET_IDS,
    ) -> None:
        self._provider = provider
        self._store = store
        self._asset_ids = asset_ids

    async def refresh(self) -> RefreshResult:
        """Fetch, upsert, append history and return the refreshed rows.

        Raises:
            UpstreamError: The provider failed; nothing was written.
            PersistenceError: Reading back the current rows failed.
        """
        quotes = await self._provider.fetch_prices(self._asset_ids)
        now = utc_now_iso(datetime.now(timezone.utc))

        updated: list[str] = []
        history: list[RateHistoryEntry] = []

        for asset_id, quote in quotes.items():
            pair = pair_for_asset(asset_id)
            if pair is None:
                continue

            rate = build_exchange_rate(pair, quote, now)
            try:
                await self._store.upsert_rate(rate)
            except PersistenceError as e:
                logger.error("rate_upsert_failed", pair=pair, error=str(e))
                continue

            updated.append(pair)
            history.append(RateHistoryEntry(pair=pair, price=quote.usd, timestamp=now))

        if history:
            try:
                await self._store.insert_history(history)
            except PersistenceError as e:
                logger.error("history_insert_failed", entries=len(history), error=str(e))

        rates = await self._store.get_rates()

        logger.info(
            "rates_refreshed",
            received=len(quotes),
            updated=len(updated),
            total_rows=len(rates),
        )
        return RefreshResult(updated=updated, rates=rates, timestamp=utc_now_iso())
