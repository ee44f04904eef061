"""Core scraper data structures and render capability interfaces.

The scraper never talks to Playwright objects directly.  It drives a
``RenderPage`` and reads ``RenderElement`` handles, so the orchestration
logic can run against a real browser or an in-memory HTML fake.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, Union, runtime_checkable

from price_scraper.config import settings


@runtime_checkable
class RenderElement(Protocol):
    """A located DOM element exposing only what extraction needs."""

    async def get_text(self) -> Optional[str]:
        """Return the element's text content, or None if it has none."""
        ...

    async def get_attribute(self, name: str) -> Optional[str]:
        """Return an attribute value, or None when the attribute is absent."""
        ...


@runtime_checkable
class RenderPage(Protocol):
    """A rendered page that can be navigated and queried."""

    async def goto(self, url: str, timeout_ms: int) -> None:
        """Navigate and wait for network idle.

        Raises:
            NavigationTimeout: If the load does not settle within timeout_ms
        """
        ...

    async def wait_for_selector(self, selector: str, timeout_ms: int) -> None:
        """Wait until selector matches an element.

        Raises:
            NavigationTimeout: If nothing matches within timeout_ms
        """
        ...

    async def query(self, selector: str) -> Optional[RenderElement]:
        """Return the first element matching selector, or None."""
        ...

    async def close(self) -> None:
        ...


@dataclass(frozen=True)
class ScrapeTarget:
    """One page to scrape and the selectors to read from it."""

    url: str
    price_selector: str
    name_selector: Optional[str] = None
    image_selector: Optional[str] = None
    id: Optional[str] = None  # Caller-supplied identifier for batch results
    currency: Optional[str] = None  # Assumed when the price text names no currency

    def __post_init__(self):
        """Validate data after initialization."""
        if not self.url or not self.url.lower().startswith(("http://", "https://")):
            raise ValueError(f"url must be an absolute http(s) URL: {self.url!r}")
        if not self.price_selector or not self.price_selector.strip():
            raise ValueError("price_selector is required")

    @property
    def identifier(self) -> str:
        """Identifier reported in batch outcomes (id, falling back to url)."""
        return self.id if self.id is not None else self.url


@dataclass(frozen=True)
class ScraperConfig:
    """Scrape options shared by every target scraped with it.

    ``headless`` and ``user_agent`` only take effect when the render
    session is first created.
    """

    timeout_ms: int = 30000
    wait_for_selector: Optional[str] = None
    headless: bool = True
    user_agent: Optional[str] = None
    selector_wait_ms: int = 5000
    settle_delay_ms: int = 1000

    @classmethod
    def from_settings(cls, **overrides) -> "ScraperConfig":
        """Build a config from application settings, applying overrides.

        Overrides whose value is None are ignored.
        """
        values = {
            "timeout_ms": settings.DEFAULT_TIMEOUT_MS,
            "headless": settings.BROWSER_HEADLESS,
            "user_agent": settings.BROWSER_USER_AGENT or None,
            "selector_wait_ms": settings.SELECTOR_WAIT_MS,
            "settle_delay_ms": settings.SETTLE_DELAY_MS,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


@dataclass(frozen=True)
class ScrapedResult:
    """Structured price data extracted from one page."""

    amount: float
    currency_code: str
    raw_price_text: str
    product_name: Optional[str] = None
    image_url: Optional[str] = None


@dataclass(frozen=True)
class BatchItemSuccess:
    target_id: str
    result: ScrapedResult

    success = True


@dataclass(frozen=True)
class BatchItemFailure:
    target_id: str
    error: str

    success = False


BatchItemOutcome = Union[BatchItemSuccess, BatchItemFailure]
