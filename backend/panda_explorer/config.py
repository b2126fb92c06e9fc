from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Bitpanda account API (X-Api-Key header)
    bitpanda_api_key: str = ""
    bitpanda_base_url: str = "https://api.bitpanda.com/v1/"

    # CoinGecko public market-chart API
    coingecko_base_url: str = "https://api.coingecko.com/api/v3/"
    coingecko_user_agent: str = "PandaExplorer/1.0"  # CoinGecko rejects anonymous clients

    # All portfolio totals are expressed in this fiat currency
    reference_currency: str = "EUR"

    # Caching / networking
    ticker_cache_ttl_seconds: int = 30
    request_timeout_seconds: float = 30.0

    log_level: str = "INFO"

    @field_validator("reference_currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        """Currency codes are compared upper-case everywhere"""
        return v.strip().upper()

    @field_validator("bitpanda_base_url", "coingecko_base_url")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """Endpoints are relative paths joined onto the base URL"""
        return v if v.endswith("/") else v + "/"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
