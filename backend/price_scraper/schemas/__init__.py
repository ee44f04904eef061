"""Pydantic schemas for the scraper API.

All request/response models are defined here for easy import.
"""

from price_scraper.schemas.common import CamelModel, ErrorResponse
from price_scraper.schemas.health import HealthCheckResponse, ServiceInfoResponse
from price_scraper.schemas.scrape import (
    BatchCompetitor,
    ScrapeBatchRequest,
    ScrapeBatchResponse,
    ScrapeBatchResult,
    ScrapeData,
    ScrapeRequest,
    ScrapeResponse,
)

__all__ = [
    # Common
    "CamelModel",
    "ErrorResponse",
    # Health
    "HealthCheckResponse",
    "ServiceInfoResponse",
    # Scrape
    "BatchCompetitor",
    "ScrapeBatchRequest",
    "ScrapeBatchResponse",
    "ScrapeBatchResult",
    "ScrapeData",
    "ScrapeRequest",
    "ScrapeResponse",
]
