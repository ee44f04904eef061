"""Health check and service info endpoints."""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from price_scraper import __version__
from price_scraper.dependencies import get_scraper
from price_scraper.schemas import HealthCheckResponse, ServiceInfoResponse
from price_scraper.scrapers.scraper import PriceScraper

router = APIRouter()

_started_at = time.monotonic()


@router.get("/", response_model=ServiceInfoResponse)
async def root():
    """Root endpoint with API information."""
    return ServiceInfoResponse(
        name="Competitor Tracker Scraper Service",
        version=__version__,
        endpoints={
            "health": "GET /health",
            "scrape": "POST /scrape",
            "scrapeBatch": "POST /scrape/batch",
        },
    )


@router.get("/health", response_model=HealthCheckResponse)
async def health_check(scraper: PriceScraper = Depends(get_scraper)):
    """Liveness probe.

    Reports uptime and whether the browser session is currently running.
    Never starts the browser.
    """
    return HealthCheckResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        uptime=round(time.monotonic() - _started_at, 3),
        browser="ready" if scraper.session.is_ready else "idle",
    )
