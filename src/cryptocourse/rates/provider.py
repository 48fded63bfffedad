"""CoinGecko simple-price client for the rate refresh endpoint.

Requests USD price, 24h change, 24h volume and market cap for a list of
coin IDs in one call. Any failure (non-success status, transport error,
unparseable body) is raised as UpstreamError; there is no retry.
"""

from decimal import InvalidOperation
from typing import Any

import httpx

from cryptocourse.config import MarketDataSettings
from cryptocourse.exceptions import UpstreamError
from cryptocourse.logging import get_logger
from cryptocourse.models import ProviderQuote, to_decimal

logger = get_logger(__name__)


def parse_quote(info: Any) -> ProviderQuote | None:
    """Parse one provider entry. Returns None when there is no usable USD price."""
    if not isinstance(info, dict) or info.get("usd") is None:
        return None
    try:
        return ProviderQuote(
            usd=to_decimal(info["usd"]),
            usd_24h_change=to_decimal(info.get("usd_24h_change")),
            usd_24h_vol=to_decimal(info.get("usd_24h_vol")),
            usd_market_cap=to_decimal(info.get("usd_market_cap")),
        )
    except InvalidOperation:
        return None


class CoinGeckoClient:
    """Fetches current prices from the CoinGecko free API.

    Args:
        http: Shared async HTTP client (owned by the caller).
        settings: Endpoint URL, optional demo API key and request timeout.
    """

    def __init__(self, http: httpx.AsyncClient, settings: MarketDataSettings) -> None:
        self._http = http
        self._settings = settings

    def _params(self, asset_ids: list[str] | tuple[str, ...]) -> dict[str, str]:
        params = {
            "ids": ",".join(asset_ids),
            "vs_currencies": "usd",
            "include_24hr_change": "true",
            "include_24hr_vol": "true",
            "include_market_cap": "true",
        }
        api_key = self._settings.api_key.get_secret_value()
        if api_key:
            params["x_cg_demo_api_key"] = api_key
        return params

    async def fetch_prices(
        self, asset_ids: list[str] | tuple[str, ...]
    ) -> dict[str, ProviderQuote]:
        """Fetch quotes keyed by coin ID, in the order the provider returned them.

        Raises:
            UpstreamError: On non-2xx status, transport failure, or malformed JSON.
        """
        try:
            response = await self._http.get(
                self._settings.coingecko_url,
                params=self._params(asset_ids),
                headers={"Accept": "application/json"},
                timeout=self._settings.request_timeout,
            )
        except httpx.HTTPError as e:
            raise UpstreamError(f"CoinGecko request failed: {e}") from e

        if not response.is_success:
            raise UpstreamError(f"CoinGecko API error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(f"Malformed CoinGecko JSON: {e}") from e
        if not isinstance(data, dict):
            raise UpstreamError("Malformed CoinGecko JSON: expected an object")

        quotes: dict[str, ProviderQuote] = {}
        for asset_id, info in data.items():
            quote = parse_quote(info)
            if quote is None:
                logger.warning("coingecko_quote_skipped", asset_id=asset_id)
                continue
            quotes[asset_id] = quote

        logger.debug("coingecko_prices_fetched", requested=len(asset_ids), received=len(quotes))
        return quotes
