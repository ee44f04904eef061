"""FastAPI dependency injection providers."""

import secrets
from typing import Optional

import structlog
from fastapi import Header, HTTPException, Request, status

from price_scraper.config import settings
from price_scraper.scrapers.scraper import PriceScraper
from price_scraper.scrapers.utils.rate_limiter import ClientRateLimiter

logger = structlog.get_logger(__name__)


def get_scraper(request: Request) -> PriceScraper:
    """Return the process-wide scraper created by the application factory."""
    return request.app.state.scraper


def get_rate_limiter(request: Request) -> ClientRateLimiter:
    return request.app.state.rate_limiter


async def verify_api_key(x_api_key: Optional[str] = Header(None)) -> None:
    """Raise HTTP 401 if the X-API-Key header does not match API_KEY.

    When no API_KEY is configured the check is skipped (development mode).
    Uses ``secrets.compare_digest`` to prevent timing attacks.

    Raises:
        HTTPException: 401 Unauthorized when the key is missing or wrong.
    """
    configured_key: str = settings.API_KEY
    if not configured_key:
        return

    if not x_api_key or not secrets.compare_digest(
        x_api_key.encode(), configured_key.encode()
    ):
        logger.warning("api_key_rejected")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )


async def enforce_rate_limit(request: Request) -> None:
    """Raise HTTP 429 once a client exceeds its request allowance.

    Raises:
        HTTPException: 429 Too Many Requests with a Retry-After header.
    """
    limiter = get_rate_limiter(request)
    client = request.client.host if request.client else "unknown"
    if not await limiter.allow(client):
        logger.warning("rate_limit_exceeded", client=client)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests from this IP, please try again later.",
            headers={"Retry-After": str(limiter.retry_after(client))},
        )
