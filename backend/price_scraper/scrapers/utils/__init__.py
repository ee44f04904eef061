"""Scraper utilities for session management, retry, rate limiting and price normalization."""

from .rate_limiter import ClientRateLimiter, TokenBucket
from .normalizer import (
    PriceNormalizer,
    NormalizedPrice,
    normalize_price,
    CURRENCY_SYMBOLS,
    CURRENCY_CODES,
    DEFAULT_CURRENCY,
)
from .retry import with_retry
from .browser_manager import BrowserManager, PlaywrightPage, PlaywrightElement, DEFAULT_USER_AGENT


__all__ = [
    # Rate limiting
    "ClientRateLimiter",
    "TokenBucket",
    # Normalization
    "PriceNormalizer",
    "NormalizedPrice",
    "normalize_price",
    "CURRENCY_SYMBOLS",
    "CURRENCY_CODES",
    "DEFAULT_CURRENCY",
    # Retry
    "with_retry",
    # Browser session
    "BrowserManager",
    "PlaywrightPage",
    "PlaywrightElement",
    "DEFAULT_USER_AGENT",
]
