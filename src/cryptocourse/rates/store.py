"""Typed SQLite read/write abstraction for current rates and rate history.

All SQL is isolated behind RatesStore. Every aiosqlite failure surfaces as
PersistenceError so callers can tell a rejected write from a provider error.

CRITICAL: All monetary values stored as TEXT in SQLite, restored as Decimal on read.
"""

import uuid
from decimal import Decimal

import aiosqlite

from cryptocourse.exceptions import PersistenceError
from cryptocourse.logging import get_logger
from cryptocourse.models import ExchangeRate, RateHistoryEntry
from cryptocourse.rates.database import RatesDatabase

logger = get_logger(__name__)

_RATE_COLUMNS = (
    "id, pair, price, price_change_24h, volume_24h, "
    "high_24h, low_24h, market_cap, last_updated"
)


def _row_to_rate(row: tuple) -> ExchangeRate:
    return ExchangeRate(
        id=row[0],
        pair=row[1],
        price=Decimal(row[2]),
        price_change_24h=Decimal(row[3]),
        volume_24h=Decimal(row[4]),
        high_24h=Decimal(row[5]),
        low_24h=Decimal(row[6]),
        market_cap=Decimal(row[7]),
        last_updated=row[8],
    )


class RatesStore:
    """Async SQLite store for the exchange_rates and rate_history tables.

    Usage:
        async with RatesDatabase("data/rates.db") as database:
            store = RatesStore(database)
            await store.upsert_rate(rate)
    """

    def __init__(self, database: RatesDatabase) -> None:
        self._database = database

    # ──────────────────────────────────────────────
    # Write methods
    # ──────────────────────────────────────────────

    async def upsert_rate(self, rate: ExchangeRate) -> None:
        """Insert or replace the row for rate.pair in a single statement.

        The row id is assigned on first insert and kept on later updates.
        """
        try:
            await self._database.db.execute(
                f"INSERT INTO exchange_rates ({_RATE_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?) "
                "ON CONFLICT(pair) DO UPDATE SET "
                "price = excluded.price, "
                "price_change_24h = excluded.price_change_24h, "
                "volume_24h = excluded.volume_24h, "
                "high_24h = excluded.high_24h, "
                "low_24h = excluded.low_24h, "
                "market_cap = excluded.market_cap, "
                "last_updated = excluded.last_updated",
                (
                    rate.id or str(uuid.uuid4()),
                    rate.pair,
                    str(rate.price),
                    str(rate.price_change_24h),
                    str(rate.volume_24h),
                    str(rate.high_24h),
                    str(rate.low_24h),
                    str(rate.market_cap),
                    rate.last_updated,
                ),
            )
            await self._database.db.commit()
        except aiosqlite.Error as e:
            raise PersistenceError(f"upsert failed for {rate.pair}: {e}") from e

    async def insert_history(self, entries: list[RateHistoryEntry]) -> int:
        """Append history entries in one batch. Returns the number inserted."""
        if not entries:
            return 0

        data = [(e.pair, str(e.price), e.timestamp) for e in entries]
        try:
            cursor = await self._database.db.executemany(
                "INSERT INTO rate_history (pair, price, timestamp) VALUES (?, ?, ?)",
                data,
            )
            await self._database.db.commit()
        except aiosqlite.Error as e:
            raise PersistenceError(f"history insert failed: {e}") from e

        logger.debug("inserted_rate_history", inserted=cursor.rowcount)
        return cursor.rowcount

    # ──────────────────────────────────────────────
    # Read methods
    # ──────────────────────────────────────────────

    async def get_rates(self) -> list[ExchangeRate]:
        """Return every current rate ordered by pair symbol."""
        try:
            cursor = await self._database.db.execute(
                f"SELECT {_RATE_COLUMNS} FROM exchange_rates ORDER BY pair ASC"
            )
            rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise PersistenceError(f"rates read failed: {e}") from e
        return [_row_to_rate(row) for row in rows]

    async def get_history(self, pair: str | None = None) -> list[RateHistoryEntry]:
        """Return history entries, oldest first, optionally for one pair."""
        query = "SELECT pair, price, timestamp FROM rate_history"
        params: list = []
        if pair is not None:
            query += " WHERE pair = ?"
            params.append(pair)
        query += " ORDER BY id ASC"

        try:
            cursor = await self._database.db.execute(query, params)
            rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise PersistenceError(f"history read failed: {e}") from e
        return [
            RateHistoryEntry(pair=row[0], price=Decimal(row[1]), timestamp=row[2])
            for row in rows
        ]
