"""Configuration system using pydantic-settings with environment variable loading."""

from datetime import date

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from cryptocourse.logging import get_logger

logger = get_logger(__name__)


class DatabaseSettings(BaseSettings):
    """SQLite storage for current rates and rate history."""

    model_config = SettingsConfigDict(env_prefix="DATABASE_")

    path: str = "data/rates.db"


class MarketDataSettings(BaseSettings):
    """CoinGecko market-data provider settings."""

    model_config = SettingsConfigDict(env_prefix="MARKET_DATA_")

    coingecko_url: str = "https://api.coingecko.com/api/v3/simple/price"
    api_key: SecretStr = SecretStr("")  # optional demo key for higher rate limits
    request_timeout: float = 10.0


class ServiceSettings(BaseSettings):
    """Where the landing page finds the rate refresh endpoint.

    Both values are required for the live price widget; startup continues
    without them (see check_service_settings).
    """

    model_config = SettingsConfigDict(env_prefix="SERVICE_")

    url: str = ""
    access_key: SecretStr = SecretStr("")


class LeadRelaySettings(BaseSettings):
    """Spreadsheet relay receiving lead-form submissions."""

    model_config = SettingsConfigDict(env_prefix="LEAD_RELAY_")

    url: str = (
        "https://script.google.com/macros/s/"
        "AKfycbyx7UdTbuwfOn7lG8MQFLeFgsELwfVN8oSE21_0yom9dsQs-MrNhka9hTEvcRWcX48SGg/exec"
    )
    request_timeout: float = 10.0


class PageSettings(BaseSettings):
    """Landing page server and widget behaviour."""

    model_config = SettingsConfigDict(env_prefix="PAGE_")

    host: str = "0.0.0.0"
    port: int = 8080
    refresh_interval: int = 30  # seconds between live price polls
    featured_pair: str = "BTC-USD"
    course_anchor_date: date = date(2026, 1, 9)
    acknowledgement_seconds: float = 5.0
    nav_scroll_threshold: int = 100  # px
    reveal_threshold: float = 0.1  # fraction of element visible


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    database: DatabaseSettings = DatabaseSettings()
    market_data: MarketDataSettings = MarketDataSettings()
    service: ServiceSettings = ServiceSettings()
    lead_relay: LeadRelaySettings = LeadRelaySettings()
    page: PageSettings = PageSettings()


def check_service_settings(service: ServiceSettings) -> bool:
    """Log an error when the service URL or access key is missing.

    Returns True when both values are present. Never raises: the page still
    starts, only the live price widget stays on its placeholder.
    """
    missing = []
    if not service.url:
        missing.append("SERVICE_URL")
    if not service.access_key.get_secret_value():
        missing.append("SERVICE_ACCESS_KEY")
    if missing:
        logger.error("missing_service_config", missing=missing)
        return False
    return True
