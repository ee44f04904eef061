"""Selector-driven price scraper.

Drives one shared render session through navigate -> wait -> extract ->
normalize for a single target, and layers retry and sequential batch
execution on top of that.
"""

import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence

import structlog

from price_scraper.core.exceptions import ElementNotFound, EmptyContent, ScrapeError
from price_scraper.scrapers.base import (
    BatchItemFailure,
    BatchItemOutcome,
    BatchItemSuccess,
    ScrapedResult,
    ScraperConfig,
    ScrapeTarget,
)
from price_scraper.scrapers.extractor import extract_image_url, extract_text
from price_scraper.scrapers.utils.browser_manager import BrowserManager
from price_scraper.scrapers.utils.normalizer import DEFAULT_CURRENCY, PriceNormalizer
from price_scraper.scrapers.utils.retry import with_retry

logger = structlog.get_logger(__name__)


class PriceScraper:
    """Scrapes prices from pages through a single shared browser session.

    All public entry points are serialized with a lock because the session
    holds exactly one page.  Throughput scales by running more processes,
    not by calling this concurrently.
    """

    def __init__(
        self,
        session: Optional[BrowserManager] = None,
        retry_base_delay_ms: int = 1000,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the scraper.

        Args:
            session: Render session manager (one per process)
            retry_base_delay_ms: Backoff base for retried scrapes
            sleep: Async sleep used for settle delays and backoff
        """
        self.session = session or BrowserManager()
        self.retry_base_delay_ms = retry_base_delay_ms
        self._sleep = sleep
        self._lock = asyncio.Lock()

    async def scrape_one(
        self,
        target: ScrapeTarget,
        config: ScraperConfig,
    ) -> ScrapedResult:
        """Scrape a single target.

        Args:
            target: URL and selectors to read
            config: Timeouts and optional wait selector

        Returns:
            ScrapedResult

        Raises:
            ScrapeError: Wrapping any navigation, extraction or parse failure
        """
        page = await self.session.ensure_ready(config)
        log = logger.bind(url=target.url)

        try:
            await page.goto(target.url, timeout_ms=config.timeout_ms)

            if config.wait_for_selector:
                await page.wait_for_selector(
                    config.wait_for_selector, timeout_ms=config.selector_wait_ms
                )

            # Give client-side rendering a moment to fill in deferred content
            await self._sleep(config.settle_delay_ms / 1000.0)

            price_text = await extract_text(page, target.price_selector)
            if price_text is None:
                raise ElementNotFound(target.price_selector)
            price_text = price_text.strip()
            if not price_text:
                raise EmptyContent(target.price_selector)

            price = PriceNormalizer.normalize(price_text, target.currency or DEFAULT_CURRENCY)

            product_name = None
            if target.name_selector:
                name_text = await extract_text(page, target.name_selector)
                if name_text is not None:
                    product_name = name_text.strip()

            image_url = None
            if target.image_selector:
                image_url = await extract_image_url(page, target.image_selector)

        except Exception as e:
            log.warning("scrape_failed", error=str(e), error_type=type(e).__name__)
            raise ScrapeError(target.url, e) from e

        log.info("scrape_succeeded", amount=price.amount, currency=price.currency_code)
        return ScrapedResult(
            amount=price.amount,
            currency_code=price.currency_code,
            product_name=product_name,
            image_url=image_url,
            raw_price_text=price_text,
        )

    async def _scrape_with_retry(
        self,
        target: ScrapeTarget,
        config: ScraperConfig,
        max_retries: int,
    ) -> ScrapedResult:
        return await with_retry(
            lambda: self.scrape_one(target, config),
            max_attempts=max_retries,
            base_delay_ms=self.retry_base_delay_ms,
            sleep=self._sleep,
        )

    async def scrape_with_retry(
        self,
        target: ScrapeTarget,
        config: ScraperConfig,
        max_retries: int = 3,
    ) -> ScrapedResult:
        """Scrape a target, retrying failures with exponential backoff.

        Raises:
            ScrapeError: From the final attempt once retries are exhausted
        """
        async with self._lock:
            return await self._scrape_with_retry(target, config, max_retries)

    async def run_batch(
        self,
        targets: Sequence[ScrapeTarget],
        config: ScraperConfig,
        max_retries: int = 3,
    ) -> List[BatchItemOutcome]:
        """Scrape targets one at a time, collecting an outcome for each.

        A failing target never stops the batch.  Outcomes are returned in
        input order.
        """
        outcomes: List[BatchItemOutcome] = []
        async with self._lock:
            logger.info("batch_started", size=len(targets))
            for target in targets:
                try:
                    result = await self._scrape_with_retry(target, config, max_retries)
                    outcomes.append(BatchItemSuccess(target_id=target.identifier, result=result))
                except Exception as e:
                    outcomes.append(BatchItemFailure(target_id=target.identifier, error=str(e)))

            failed = sum(1 for o in outcomes if not o.success)
            logger.info("batch_complete", size=len(targets), failed=failed)
        return outcomes

    async def close(self) -> None:
        """Tear down the render session."""
        await self.session.teardown()
