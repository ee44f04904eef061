"""Pytest configuration and shared fixtures.

The scraper is exercised against ``FakePage``, an in-memory RenderPage
backed by BeautifulSoup, so no browser is needed.
"""

from typing import Dict, List, Optional

import pytest
from bs4 import BeautifulSoup

from price_scraper.core.exceptions import NavigationTimeout
from price_scraper.scrapers.base import ScraperConfig
from price_scraper.scrapers.scraper import PriceScraper


@pytest.fixture
def anyio_backend():
    """Use asyncio as the async backend for tests."""
    return "asyncio"


# ============================================================================
# FAKE RENDER CAPABILITY
# ============================================================================

class FakeElement:
    """RenderElement over a BeautifulSoup tag."""

    def __init__(self, tag):
        self._tag = tag

    async def get_text(self) -> Optional[str]:
        return self._tag.get_text()

    async def get_attribute(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value


class FakePage:
    """RenderPage serving static HTML snapshots keyed by URL.

    Navigating to a URL with no snapshot behaves like a load that never
    settles and raises NavigationTimeout.
    """

    def __init__(self, pages: Dict[str, str]):
        self.pages = pages
        self.visited: List[str] = []
        self.waited_for: List[tuple] = []
        self.closed = False
        self._soup: Optional[BeautifulSoup] = None

    async def goto(self, url: str, timeout_ms: int) -> None:
        self.visited.append(url)
        if url not in self.pages:
            self._soup = None
            raise NavigationTimeout(url, timeout_ms)
        self._soup = BeautifulSoup(self.pages[url], "html.parser")

    async def wait_for_selector(self, selector: str, timeout_ms: int) -> None:
        self.waited_for.append((selector, timeout_ms))
        if self._soup is None or self._soup.select_one(selector) is None:
            raise NavigationTimeout(selector, timeout_ms, action="waiting for selector")

    async def query(self, selector: str) -> Optional[FakeElement]:
        if self._soup is None:
            return None
        tag = self._soup.select_one(selector)
        return FakeElement(tag) if tag is not None else None

    async def close(self) -> None:
        self.closed = True


class FakeSession:
    """Session manager stand-in handing out a single FakePage."""

    def __init__(self, page: FakePage):
        self._page = page
        self.ensure_ready_calls = 0
        self.teardown_calls = 0
        self.ready = False

    @property
    def is_ready(self) -> bool:
        return self.ready

    async def ensure_ready(self, config=None) -> FakePage:
        self.ensure_ready_calls += 1
        self.ready = True
        return self._page

    async def teardown(self) -> None:
        self.teardown_calls += 1
        self.ready = False


class SleepRecorder:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


# ============================================================================
# FIXTURES
# ============================================================================

PRODUCT_HTML = """
<html><body>
  <h1 class="product-title">  Acme Widget Pro  </h1>
  <span class="price">$1,299.99</span>
  <img class="hero" src="https://cdn.example.com/widget.jpg" data-src="https://cdn.example.com/lazy.jpg">
</body></html>
"""

LAZY_IMAGE_HTML = """
<html><body>
  <div class="price">€49.00 EUR</div>
  <img class="hero" data-src="https://cdn.example.com/lazy.jpg">
</body></html>
"""

SRCSET_HTML = """
<html><body>
  <div class="price">£15</div>
  <img class="hero" srcset="a.jpg 1x, b.jpg 2x">
</body></html>
"""

EMPTY_PRICE_HTML = """
<html><body><span class="price">   </span></body></html>
"""

NO_PRICE_HTML = """
<html><body><span class="cost">Call us</span></body></html>
"""

FREE_HTML = """
<html><body><span class="price">Free!</span></body></html>
"""


@pytest.fixture
def pages() -> Dict[str, str]:
    return {
        "https://shop.example.com/widget": PRODUCT_HTML,
        "https://shop.example.com/lazy": LAZY_IMAGE_HTML,
        "https://shop.example.com/srcset": SRCSET_HTML,
        "https://shop.example.com/empty": EMPTY_PRICE_HTML,
        "https://shop.example.com/missing": NO_PRICE_HTML,
        "https://shop.example.com/free": FREE_HTML,
    }


@pytest.fixture
def fake_page(pages) -> FakePage:
    return FakePage(pages)


@pytest.fixture
def fake_session(fake_page) -> FakeSession:
    return FakeSession(fake_page)


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def scraper(fake_session, sleep_recorder) -> PriceScraper:
    return PriceScraper(session=fake_session, retry_base_delay_ms=1000, sleep=sleep_recorder)


@pytest.fixture
def config() -> ScraperConfig:
    return ScraperConfig()
