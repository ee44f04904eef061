"""Application configuration via Pydantic Settings."""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # App
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    PORT: int = 3000

    # Request authentication.  An empty string leaves /scrape endpoints open
    # (development mode).
    API_KEY: str = ""

    # Per-client rate limit on /scrape endpoints
    RATE_LIMIT_REQUESTS: int = 100
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60

    # Browser session
    BROWSER_HEADLESS: bool = True
    BROWSER_USER_AGENT: str = ""

    # Scrape timing (milliseconds)
    DEFAULT_TIMEOUT_MS: int = 30000
    SELECTOR_WAIT_MS: int = 5000
    SETTLE_DELAY_MS: int = 1000

    # Retry / batch
    MAX_RETRIES: int = 3
    RETRY_BASE_DELAY_MS: int = 1000
    MAX_BATCH_SIZE: int = 50

    # Comma-separated list of allowed CORS origins ("*" for any)
    CORS_ORIGINS: str = "*"

    def get_cors_origins(self) -> List[str]:
        """Parse CORS_ORIGINS into a list of origins.

        Returns:
            List of origin strings, ["*"] when unrestricted
        """
        if not self.CORS_ORIGINS:
            return []
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
