"""Pydantic schemas for the scrape endpoints.

Field names are camelCase on the wire (``priceSelector``) and snake_case
in Python (``price_selector``).
"""

from datetime import datetime
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import Field, field_validator

from price_scraper.config import settings
from price_scraper.scrapers.base import ScrapedResult, ScrapeTarget
from price_scraper.schemas.common import CamelModel


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ScrapeRequest(CamelModel):
    """Payload for POST /scrape."""

    url: str = Field(
        ...,
        description="Absolute http(s) URL of the product page",
        examples=["https://shop.example.com/products/widget"],
    )
    price_selector: str = Field(
        ...,
        min_length=1,
        description="CSS selector of the element holding the price",
        examples=[".product-price"],
    )
    name_selector: Optional[str] = Field(None, description="CSS selector of the product name")
    image_selector: Optional[str] = Field(None, description="CSS selector of the product image")
    currency: Optional[str] = Field(
        None,
        pattern=r"^[A-Za-z]{3}$",
        description="Currency assumed when the price text names none",
        examples=["EUR"],
    )
    wait_for_selector: Optional[str] = Field(
        None, description="Selector to wait for (up to 5s) after the page loads"
    )
    timeout: Optional[int] = Field(
        None,
        gt=0,
        description="Navigation timeout in milliseconds",
        examples=[30000],
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Ensure url is an absolute http(s) URL."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("url must be an absolute http or https URL")
        return v

    @field_validator("price_selector")
    @classmethod
    def validate_price_selector(cls, v: str) -> str:
        """Reject selectors that are blank once whitespace is stripped."""
        if not v.strip():
            raise ValueError("priceSelector must not be blank")
        return v

    def to_target(self, target_id: Optional[str] = None) -> ScrapeTarget:
        return ScrapeTarget(
            url=self.url,
            price_selector=self.price_selector,
            name_selector=self.name_selector,
            image_selector=self.image_selector,
            id=target_id,
            currency=self.currency.upper() if self.currency else None,
        )


class BatchCompetitor(ScrapeRequest):
    """One entry of a batch request, identified by a caller-supplied id."""

    id: str = Field(..., description="Caller identifier echoed in the result")


class ScrapeBatchRequest(CamelModel):
    """Payload for POST /scrape/batch."""

    competitors: List[BatchCompetitor] = Field(
        ...,
        min_length=1,
        max_length=settings.MAX_BATCH_SIZE,
        description="Pages to scrape, processed sequentially in order",
    )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ScrapeData(CamelModel):
    """Price data for one scraped page."""

    price: float
    currency: str
    product_name: Optional[str] = None
    image_url: Optional[str] = None
    scraped_at: datetime
    raw_price: str

    @classmethod
    def from_result(cls, result: ScrapedResult, scraped_at: datetime) -> "ScrapeData":
        return cls(
            price=result.amount,
            currency=result.currency_code,
            product_name=result.product_name,
            image_url=result.image_url,
            scraped_at=scraped_at,
            raw_price=result.raw_price_text,
        )


class ScrapeResponse(CamelModel):
    """Response body for a successful POST /scrape."""

    success: bool = True
    data: ScrapeData


class ScrapeBatchResult(CamelModel):
    """Outcome of one batch entry."""

    id: str
    success: bool
    data: Optional[ScrapeData] = None
    error: Optional[str] = None


class ScrapeBatchResponse(CamelModel):
    """Response body for POST /scrape/batch."""

    success: bool = True
    results: List[ScrapeBatchResult]
