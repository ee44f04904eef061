"""Playwright browser lifecycle manager.

Owns the single long-lived render session (browser, isolated context and
one page) shared by every scrape in the process.
"""

import asyncio
from typing import Optional

import structlog
from playwright.async_api import (
    Browser,
    BrowserContext,
    ElementHandle,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from price_scraper.core.exceptions import NavigationTimeout, SessionNotReady
from price_scraper.scrapers.base import ScraperConfig

logger = structlog.get_logger(__name__)


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36 CompetitorTracker/1.0"
)

VIEWPORT = {"width": 1920, "height": 1080}

# Flags for running Chromium inside containers and sandboxes
LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
]


class PlaywrightElement:
    """RenderElement backed by a Playwright ElementHandle."""

    def __init__(self, handle: ElementHandle):
        self._handle = handle

    async def get_text(self) -> Optional[str]:
        return await self._handle.text_content()

    async def get_attribute(self, name: str) -> Optional[str]:
        return await self._handle.get_attribute(name)


class PlaywrightPage:
    """RenderPage backed by a Playwright Page."""

    def __init__(self, page: Page):
        self._page = page

    async def goto(self, url: str, timeout_ms: int) -> None:
        try:
            await self._page.goto(url, wait_until="networkidle", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise NavigationTimeout(url, timeout_ms) from e

    async def wait_for_selector(self, selector: str, timeout_ms: int) -> None:
        try:
            await self._page.wait_for_selector(selector, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise NavigationTimeout(selector, timeout_ms, action="waiting for selector") from e

    async def query(self, selector: str) -> Optional[PlaywrightElement]:
        handle = await self._page.query_selector(selector)
        if handle is None:
            return None
        return PlaywrightElement(handle)

    async def close(self) -> None:
        await self._page.close()


class BrowserManager:
    """Manages the Playwright render session lifecycle.

    The session is created lazily on the first ``ensure_ready`` call and
    reused until ``teardown``.  No per-request isolation is provided: a page
    left in a bad state by one scrape is seen by the next one.
    """

    def __init__(self):
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[PlaywrightPage] = None
        self._lock = asyncio.Lock()

    @property
    def is_ready(self) -> bool:
        return self._page is not None

    @property
    def page(self) -> PlaywrightPage:
        """The live page.

        Raises:
            SessionNotReady: If ensure_ready has not been called
        """
        if self._page is None:
            raise SessionNotReady()
        return self._page

    async def ensure_ready(self, config: Optional[ScraperConfig] = None) -> PlaywrightPage:
        """Start the browser session if it is not already running.

        Idempotent: a second call returns the existing page without doing
        any work, whatever config it is given.

        Args:
            config: Launch options (headless, user agent)

        Returns:
            The session's page
        """
        async with self._lock:
            if self._page is not None:
                return self._page

            config = config or ScraperConfig()
            playwright = await async_playwright().start()
            browser = context = None
            try:
                browser = await playwright.chromium.launch(
                    headless=config.headless,
                    args=LAUNCH_ARGS,
                )
                context = await browser.new_context(
                    user_agent=config.user_agent or DEFAULT_USER_AGENT,
                    viewport=VIEWPORT,
                )
                page = await context.new_page()
            except Exception:
                logger.error("browser_start_failed", exc_info=True)
                if context is not None:
                    await context.close()
                if browser is not None:
                    await browser.close()
                await playwright.stop()
                raise

            # Publish all references together so callers never see a half-built session
            self._playwright = playwright
            self._browser = browser
            self._context = context
            self._page = PlaywrightPage(page)
            logger.info(
                "browser_started",
                headless=config.headless,
                custom_user_agent=bool(config.user_agent),
            )
            return self._page

    async def teardown(self) -> None:
        """Close page, context and browser in that order.

        A failure closing one level is logged and does not stop the next
        level from being closed.  All references are cleared afterward.
        """
        async with self._lock:
            page, context, browser, playwright = (
                self._page,
                self._context,
                self._browser,
                self._playwright,
            )
            self._page = None
            self._context = None
            self._browser = None
            self._playwright = None

            if page is None and context is None and browser is None and playwright is None:
                return

            for name, closer in (
                ("page", page.close if page else None),
                ("context", context.close if context else None),
                ("browser", browser.close if browser else None),
                ("driver", playwright.stop if playwright else None),
            ):
                if closer is None:
                    continue
                try:
                    await closer()
                except Exception as e:
                    logger.warning("browser_close_failed", level=name, error=str(e))

            logger.info("browser_stopped")
