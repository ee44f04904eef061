"""Custom exception classes for the scraper service."""

from typing import Optional


class ScraperServiceError(Exception):
    """Base exception for all scraper service errors."""

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class ParseError(ScraperServiceError):
    """Raised when price text cannot be turned into a number."""


class ElementNotFound(ScraperServiceError):
    """Raised when a required selector matches no element."""

    def __init__(self, selector: str, what: str = "Price"):
        self.selector = selector
        super().__init__(f"{what} element not found with selector: {selector}")


class EmptyContent(ScraperServiceError):
    """Raised when a matched element has no usable text."""

    def __init__(self, selector: str, what: str = "Price"):
        self.selector = selector
        super().__init__(f"{what} element has no text content: {selector}")


class NavigationTimeout(ScraperServiceError):
    """Raised when a page load or selector wait exceeds its bound."""

    def __init__(self, target: str, timeout_ms: int, action: str = "navigating to"):
        self.target = target
        self.timeout_ms = timeout_ms
        super().__init__(f"Timed out after {timeout_ms}ms {action} {target}")


class ScrapeError(ScraperServiceError):
    """Raised when scraping a URL fails for any reason.

    Carries the target URL and the underlying exception so callers can
    trace a failure back to its page.
    """

    def __init__(self, url: str, cause: Optional[BaseException] = None):
        self.url = url
        self.cause = cause
        reason = str(cause) if cause is not None else "unknown error"
        super().__init__(f"Failed to scrape {url}: {reason}")


class SessionNotReady(ScraperServiceError):
    """Raised when the render session is used before it was started."""

    def __init__(self):
        super().__init__("Page not initialized")
