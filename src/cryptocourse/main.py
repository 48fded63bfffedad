"""Entry points for the course site.

`cryptocourse` serves the landing page and the live rate endpoint from one
uvicorn process. `cryptocourse-refresh` runs a single rate refresh without
the web server, for cron or a platform scheduler.

Component wiring order (in _build_components):
1. RatesDatabase (SQLite, connected in the lifespan)
2. Shared httpx.AsyncClient
3. CoinGeckoClient -> RatesStore -> RateRefresher
4. LiveRatesClient -> PriceTicker (owns the hero card polling task)
5. LeadRelay -> LeadFormController
"""

import asyncio
import sys
from contextlib import asynccontextmanager
from typing import Any

import httpx
import uvicorn
from fastapi import FastAPI

from cryptocourse.config import AppSettings, check_service_settings
from cryptocourse.logging import get_logger, refresh_context, setup_logging
from cryptocourse.rates import CoinGeckoClient, RateRefresher, RatesDatabase, RatesStore
from cryptocourse.site.leads import LeadFormController, LeadRelay
from cryptocourse.site.rates_client import LiveRatesClient
from cryptocourse.site.ticker import PriceTicker
from cryptocourse.site.widgets import HeroCard


def _build_components(settings: AppSettings, hero_card: HeroCard) -> dict[str, Any]:
    """Build the dependency graph. Nothing is connected or started here."""
    database = RatesDatabase(settings.database.path)
    http = httpx.AsyncClient(timeout=settings.market_data.request_timeout)

    provider = CoinGeckoClient(http, settings.market_data)
    store = RatesStore(database)
    refresher = RateRefresher(provider, store)

    rates_client = LiveRatesClient(
        http, settings.service.url, settings.service.access_key
    )
    ticker = PriceTicker(
        rates_client,
        hero_card,
        pair=settings.page.featured_pair,
        interval=settings.page.refresh_interval,
    )

    relay = LeadRelay(settings.lead_relay.url, http, timeout=settings.lead_relay.request_timeout)
    lead_controller = LeadFormController(
        relay, acknowledgement_seconds=settings.page.acknowledgement_seconds
    )

    return {
        "database": database,
        "http": http,
        "refresher": refresher,
        "ticker": ticker,
        "lead_controller": lead_controller,
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect storage, start the price ticker; undo both on shutdown."""
    logger = get_logger("cryptocourse.main")
    components = _build_components(app.state.settings, app.state.hero_card)

    app.state.refresher = components["refresher"]
    app.state.lead_controller = components["lead_controller"]

    ticker: PriceTicker = components["ticker"]
    ticker.on_update = app.state.hero_feed.push

    try:
        await components["database"].connect()
        await ticker.start()
        logger.info("lifespan_started")

        yield
    finally:
        # the client and database are released even if the ticker fails to stop
        try:
            await ticker.stop()
        finally:
            await components["http"].aclose()
            await components["database"].close()

        logger.info("course_site_stopped")


async def run() -> None:
    """Serve the landing page and rate endpoint."""
    from cryptocourse.site.app import create_site_app

    settings = AppSettings()
    setup_logging(settings.log_level)
    logger = get_logger("cryptocourse.main")

    check_service_settings(settings.service)

    app = create_site_app(settings, lifespan=lifespan)

    logger.info("starting_course_site", host=settings.page.host, port=settings.page.port)

    config = uvicorn.Config(
        app,
        host=settings.page.host,
        port=settings.page.port,
        log_level="warning",
    )
    server = uvicorn.Server(config)
    await server.serve()


async def refresh_once(settings: AppSettings) -> int:
    """Run one refresh outside the web server. Returns a process exit code."""
    logger = get_logger("cryptocourse.main")
    async with httpx.AsyncClient(timeout=settings.market_data.request_timeout) as http:
        async with RatesDatabase(settings.database.path) as database:
            refresher = RateRefresher(
                CoinGeckoClient(http, settings.market_data), RatesStore(database)
            )
            with refresh_context("schedule"):
                try:
                    result = await refresher.refresh()
                except Exception as e:
                    logger.error("scheduled_refresh_failed", error=str(e), exc_info=True)
                    return 1

    logger.info("scheduled_refresh_done", updated=result.updated, timestamp=result.timestamp)
    return 0


def main() -> None:
    """Synchronous entry point for the web server."""
    asyncio.run(run())


def refresh_main() -> None:
    """Synchronous entry point for a single scheduled refresh."""
    settings = AppSettings()
    setup_logging(settings.log_level)
    sys.exit(asyncio.run(refresh_once(settings)))


if __name__ == "__main__":
    main()
