"""Tests for the Playwright session manager (Playwright itself is mocked)."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from price_scraper.core.exceptions import NavigationTimeout, SessionNotReady
from price_scraper.scrapers.base import ScraperConfig
from price_scraper.scrapers.utils.browser_manager import (
    DEFAULT_USER_AGENT,
    LAUNCH_ARGS,
    BrowserManager,
    PlaywrightPage,
)


@pytest.fixture
def playwright_mocks():
    """Patch async_playwright and record close order."""
    closed = []

    page = MagicMock(name="page")
    page.close = AsyncMock(side_effect=lambda: closed.append("page"))

    context = MagicMock(name="context")
    context.new_page = AsyncMock(return_value=page)
    context.close = AsyncMock(side_effect=lambda: closed.append("context"))

    browser = MagicMock(name="browser")
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock(side_effect=lambda: closed.append("browser"))

    playwright = MagicMock(name="playwright")
    playwright.chromium.launch = AsyncMock(return_value=browser)
    playwright.stop = AsyncMock(side_effect=lambda: closed.append("driver"))

    starter = MagicMock()
    starter.start = AsyncMock(return_value=playwright)

    with patch(
        "price_scraper.scrapers.utils.browser_manager.async_playwright",
        return_value=starter,
    ):
        yield {
            "page": page,
            "context": context,
            "browser": browser,
            "playwright": playwright,
            "starter": starter,
            "closed": closed,
        }


class TestEnsureReady:

    async def test_creates_session_with_defaults(self, playwright_mocks):
        manager = BrowserManager()

        page = await manager.ensure_ready(ScraperConfig())

        assert isinstance(page, PlaywrightPage)
        assert manager.is_ready
        playwright_mocks["playwright"].chromium.launch.assert_awaited_once_with(
            headless=True, args=LAUNCH_ARGS
        )
        playwright_mocks["browser"].new_context.assert_awaited_once_with(
            user_agent=DEFAULT_USER_AGENT,
            viewport={"width": 1920, "height": 1080},
        )

    async def test_custom_user_agent_and_headful(self, playwright_mocks):
        manager = BrowserManager()

        await manager.ensure_ready(ScraperConfig(headless=False, user_agent="TestAgent/1.0"))

        launch = playwright_mocks["playwright"].chromium.launch
        assert launch.await_args.kwargs["headless"] is False
        new_context = playwright_mocks["browser"].new_context
        assert new_context.await_args.kwargs["user_agent"] == "TestAgent/1.0"

    async def test_idempotent(self, playwright_mocks):
        manager = BrowserManager()

        first = await manager.ensure_ready(ScraperConfig())
        second = await manager.ensure_ready(ScraperConfig(headless=False))

        assert first is second
        playwright_mocks["starter"].start.assert_awaited_once()
        playwright_mocks["playwright"].chromium.launch.assert_awaited_once()
        playwright_mocks["context"].new_page.assert_awaited_once()

    async def test_failed_start_leaves_no_partial_session(self, playwright_mocks):
        playwright_mocks["context"].new_page.side_effect = RuntimeError("boom")
        manager = BrowserManager()

        with pytest.raises(RuntimeError):
            await manager.ensure_ready(ScraperConfig())

        assert not manager.is_ready
        assert playwright_mocks["closed"] == ["context", "browser", "driver"]

    def test_page_before_ready_raises(self):
        with pytest.raises(SessionNotReady):
            BrowserManager().page


class TestTeardown:

    async def test_closes_in_reverse_acquisition_order(self, playwright_mocks):
        manager = BrowserManager()
        await manager.ensure_ready(ScraperConfig())

        await manager.teardown()

        assert playwright_mocks["closed"] == ["page", "context", "browser", "driver"]
        assert not manager.is_ready

    async def test_failure_at_one_level_still_closes_the_rest(self, playwright_mocks):
        playwright_mocks["page"].close.side_effect = RuntimeError("page crashed")
        manager = BrowserManager()
        await manager.ensure_ready(ScraperConfig())

        await manager.teardown()

        assert playwright_mocks["closed"] == ["context", "browser", "driver"]
        assert not manager.is_ready

    async def test_teardown_without_session_is_noop(self):
        await BrowserManager().teardown()

    async def test_ready_again_after_teardown(self, playwright_mocks):
        manager = BrowserManager()
        await manager.ensure_ready(ScraperConfig())
        await manager.teardown()
        await manager.ensure_ready(ScraperConfig())

        assert playwright_mocks["starter"].start.await_count == 2


class TestPlaywrightPage:

    async def test_goto_waits_for_network_idle(self):
        raw = MagicMock()
        raw.goto = AsyncMock()
        await PlaywrightPage(raw).goto("https://shop.example.com", timeout_ms=1234)
        raw.goto.assert_awaited_once_with(
            "https://shop.example.com", wait_until="networkidle", timeout=1234
        )

    async def test_goto_timeout_maps_to_navigation_timeout(self):
        raw = MagicMock()
        raw.goto = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout 10ms exceeded"))
        with pytest.raises(NavigationTimeout):
            await PlaywrightPage(raw).goto("https://shop.example.com", timeout_ms=10)

    async def test_wait_for_selector_timeout(self):
        raw = MagicMock()
        raw.wait_for_selector = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout"))
        with pytest.raises(NavigationTimeout, match="waiting for selector"):
            await PlaywrightPage(raw).wait_for_selector(".price", timeout_ms=5000)

    async def test_query_wraps_handles(self):
        handle = MagicMock()
        handle.text_content = AsyncMock(return_value=" $5 ")
        handle.get_attribute = AsyncMock(return_value=None)
        raw = MagicMock()
        raw.query_selector = AsyncMock(side_effect=[handle, None])
        page = PlaywrightPage(raw)

        element = await page.query(".price")
        assert await element.get_text() == " $5 "
        assert await element.get_attribute("src") is None
        assert await page.query(".nothing") is None
