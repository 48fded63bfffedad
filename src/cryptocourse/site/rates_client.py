"""HTTP client the landing page uses to call the live rate refresh endpoint."""

from typing import Any

import httpx
from pydantic import SecretStr

from cryptocourse.exceptions import RatesFetchError
from cryptocourse.logging import get_logger

logger = get_logger(__name__)

LIVE_RATES_PATH = "/functions/v1/get-live-rates"


class LiveRatesClient:
    """Calls the refresh endpoint with the public access key.

    Args:
        http: Shared async HTTP client (owned by the caller).
        base_url: Service base URL, e.g. "https://example.org".
        access_key: Public key sent as a Bearer token.
    """

    def __init__(
        self, http: httpx.AsyncClient, base_url: str, access_key: SecretStr
    ) -> None:
        self._http = http
        self._url = base_url.rstrip("/") + LIVE_RATES_PATH
        self._access_key = access_key

    async def fetch_rates(self) -> list[dict[str, Any]] | None:
        """Return the rate rows, or None when the response carries no usable rates.

        Raises:
            RatesFetchError: On transport failure, non-2xx status, or a body
                that is not JSON.
        """
        try:
            response = await self._http.get(
                self._url,
                headers={
                    "Authorization": f"Bearer {self._access_key.get_secret_value()}"
                },
            )
        except httpx.HTTPError as e:
            raise RatesFetchError(f"live rates request failed: {e}") from e

        if not response.is_success:
            raise RatesFetchError(f"HTTP error! status: {response.status_code}")

        try:
            result = response.json()
        except ValueError as e:
            raise RatesFetchError(f"live rates body is not JSON: {e}") from e

        if not isinstance(result, dict):
            return None
        rates = result.get("rates")
        if not result.get("success") or not rates:
            return None
        if not isinstance(rates, list) or not all(isinstance(r, dict) for r in rates):
            logger.warning("live_rates_malformed", rates_type=type(rates).__name__)
            return None
        return rates
