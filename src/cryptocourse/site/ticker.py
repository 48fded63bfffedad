"""Live price ticker -- polls the refresh endpoint and keeps the hero card current.

The ticker owns its background task. start() always cancels a previous
task before arming a new one, so calling it twice never leaves two polling
loops running. A failed poll is logged and the card keeps its last values.
"""

import asyncio
from decimal import InvalidOperation
from typing import Awaitable, Callable

from cryptocourse.exceptions import RatesFetchError
from cryptocourse.logging import get_logger
from cryptocourse.site.rates_client import LiveRatesClient
from cryptocourse.site.widgets import HeroCard, update_hero_card

logger = get_logger(__name__)

UpdateCallback = Callable[[HeroCard], Awaitable[object]]


class PriceTicker:
    """Periodically refreshes the hero card for one featured pair.

    Args:
        client: Live rates client.
        card: Card view model updated in place.
        pair: Featured pair symbol.
        interval: Seconds between polls (first poll runs immediately).
        on_update: Optional coroutine called after each successful card update.
    """

    def __init__(
        self,
        client: LiveRatesClient,
        card: HeroCard,
        pair: str = "BTC-USD",
        interval: float = 30.0,
        on_update: UpdateCallback | None = None,
    ) -> None:
        self._client = client
        self.card = card
        self._pair = pair
        self._interval = interval
        self.on_update = on_update
        self._task: asyncio.Task | None = None  # type: ignore[type-arg]

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """(Re)start polling. Any previous polling task is cancelled first."""
        await self._cancel_task()
        self._task = asyncio.create_task(self._poll_loop())
        logger.info("price_ticker_started", pair=self._pair, interval=self._interval)

    async def stop(self) -> None:
        """Stop polling."""
        await self._cancel_task()
        logger.info("price_ticker_stopped")

    async def _cancel_task(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.exception("price_ticker_task_failed", pair=self._pair)
            self._task = None

    async def _poll_loop(self) -> None:
        while True:
            try:
                await self.refresh_once()
            except Exception:
                # one bad poll must not end the loop
                logger.exception("price_ticker_poll_error", pair=self._pair)
            await asyncio.sleep(self._interval)

    async def refresh_once(self) -> bool:
        """Fetch rates and update the card once.

        Returns True when the card changed. Fetch and parse failures are
        logged and leave the card as it was.
        """
        try:
            rates = await self._client.fetch_rates()
            if not rates:
                return False
            changed = update_hero_card(self.card, rates, self._pair)
        except (
            RatesFetchError, InvalidOperation, KeyError, TypeError, AttributeError
        ) as e:
            logger.warning("live_rates_fetch_failed", pair=self._pair, error=str(e))
            return False

        if changed and self.on_update is not None:
            try:
                await self.on_update(self.card)
            except Exception:
                logger.warning("price_ticker_callback_error", exc_info=True)
        return changed
