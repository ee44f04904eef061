"""Scraper system for extracting prices from e-commerce pages.

This package provides:
- Render capability interfaces and the core data structures
- DOM extraction helpers driven by caller-supplied CSS selectors
- The PriceScraper orchestrator with retry and batch execution
- Utility modules for session management, retry, rate limiting and price normalization
"""

from .base import (
    RenderElement,
    RenderPage,
    ScrapeTarget,
    ScraperConfig,
    ScrapedResult,
    BatchItemSuccess,
    BatchItemFailure,
    BatchItemOutcome,
)
from .scraper import PriceScraper

__all__ = [
    # Capabilities
    "RenderElement",
    "RenderPage",
    # Data structures
    "ScrapeTarget",
    "ScraperConfig",
    "ScrapedResult",
    "BatchItemSuccess",
    "BatchItemFailure",
    "BatchItemOutcome",
    # Orchestrator
    "PriceScraper",
]
