"""Scrape endpoints.

``POST /scrape`` scrapes one page with retries and returns 500 with the
final error message when every attempt fails.  ``POST /scrape/batch``
scrapes up to MAX_BATCH_SIZE pages sequentially and always answers 200
with one result per competitor, in request order.
"""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from price_scraper.config import settings
from price_scraper.dependencies import enforce_rate_limit, get_scraper, verify_api_key
from price_scraper.schemas import (
    ErrorResponse,
    ScrapeBatchRequest,
    ScrapeBatchResponse,
    ScrapeBatchResult,
    ScrapeData,
    ScrapeRequest,
    ScrapeResponse,
)
from price_scraper.scrapers.base import BatchItemSuccess, ScraperConfig
from price_scraper.scrapers.scraper import PriceScraper

router = APIRouter(dependencies=[Depends(enforce_rate_limit), Depends(verify_api_key)])
logger = structlog.get_logger(__name__)


@router.post(
    "/scrape",
    response_model=ScrapeResponse,
    response_model_exclude_none=True,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def scrape(
    body: ScrapeRequest,
    scraper: PriceScraper = Depends(get_scraper),
):
    """Scrape a single product page."""
    config = ScraperConfig.from_settings(
        timeout_ms=body.timeout,
        wait_for_selector=body.wait_for_selector,
    )

    try:
        result = await scraper.scrape_with_retry(
            body.to_target(),
            config,
            max_retries=settings.MAX_RETRIES,
        )
    except Exception as e:
        logger.error("scrape_request_failed", url=body.url, error=str(e))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorResponse(error=str(e)).model_dump(exclude_none=True),
        )

    return ScrapeResponse(data=ScrapeData.from_result(result, datetime.now(timezone.utc)))


@router.post(
    "/scrape/batch",
    response_model=ScrapeBatchResponse,
    response_model_exclude_none=True,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def scrape_batch(
    body: ScrapeBatchRequest,
    scraper: PriceScraper = Depends(get_scraper),
):
    """Scrape several product pages in one request.

    The session-wide options (timeout, wait selector) are taken from the
    first competitor and applied to the whole batch.
    """
    first = body.competitors[0]
    config = ScraperConfig.from_settings(
        timeout_ms=first.timeout,
        wait_for_selector=first.wait_for_selector,
    )
    targets = [c.to_target(target_id=c.id) for c in body.competitors]

    outcomes = await scraper.run_batch(targets, config, max_retries=settings.MAX_RETRIES)

    results = []
    for outcome in outcomes:
        if isinstance(outcome, BatchItemSuccess):
            results.append(
                ScrapeBatchResult(
                    id=outcome.target_id,
                    success=True,
                    data=ScrapeData.from_result(outcome.result, datetime.now(timezone.utc)),
                )
            )
        else:
            results.append(
                ScrapeBatchResult(id=outcome.target_id, success=False, error=outcome.error)
            )

    return ScrapeBatchResponse(results=results)
