"""Tests for the entry points: the scheduled refresh and the app lifespan."""

from unittest.mock import AsyncMock

import pytest

from cryptocourse import main
from cryptocourse.exceptions import UpstreamError
from cryptocourse.rates import RatesDatabase, RatesStore
from cryptocourse.site.app import create_site_app


@pytest.mark.asyncio
async def test_refresh_once_writes_rates(monkeypatch, mock_settings, provider_quotes) -> None:
    monkeypatch.setattr(
        main.CoinGeckoClient, "fetch_prices", AsyncMock(return_value=provider_quotes)
    )

    assert await main.refresh_once(mock_settings) == 0

    async with RatesDatabase(mock_settings.database.path) as database:
        store = RatesStore(database)
        rates = await store.get_rates()
        history = await store.get_history()
    assert len(rates) == 10
    assert len(history) == 10


@pytest.mark.asyncio
async def test_refresh_once_reports_upstream_failure(monkeypatch, mock_settings) -> None:
    monkeypatch.setattr(
        main.CoinGeckoClient,
        "fetch_prices",
        AsyncMock(side_effect=UpstreamError("CoinGecko API error: 503")),
    )

    assert await main.refresh_once(mock_settings) == 1


@pytest.mark.asyncio
async def test_lifespan_releases_resources_when_ticker_stop_fails(
    monkeypatch, mock_settings
) -> None:
    released: list[str] = []
    real_aclose = main.httpx.AsyncClient.aclose
    real_close = main.RatesDatabase.close

    async def tracking_aclose(self) -> None:
        released.append("http")
        await real_aclose(self)

    async def tracking_close(self) -> None:
        released.append("database")
        await real_close(self)

    monkeypatch.setattr(main.httpx.AsyncClient, "aclose", tracking_aclose)
    monkeypatch.setattr(main.RatesDatabase, "close", tracking_close)
    monkeypatch.setattr(main.PriceTicker, "start", AsyncMock())
    monkeypatch.setattr(main.PriceTicker, "stop", AsyncMock(side_effect=RuntimeError("stuck")))

    app = create_site_app(mock_settings, lifespan=main.lifespan)

    with pytest.raises(RuntimeError, match="stuck"):
        async with main.lifespan(app):
            assert app.state.refresher is not None

    assert released == ["http", "database"]
