"""DOM value extraction from a rendered page.

A selector that matches nothing, or an attribute that is missing, is a
normal outcome and yields None.  Deciding whether absence is an error is
left to the caller.
"""

import re
from typing import Optional

import structlog

from price_scraper.scrapers.base import RenderElement, RenderPage

logger = structlog.get_logger(__name__)

_EVENT_HANDLER = re.compile(r"on\w+\s*=", re.IGNORECASE)
_JS_SCHEME = re.compile(r"javascript:", re.IGNORECASE)


def sanitize_selector(selector: str) -> str:
    """Strip script-like fragments from a selector (best effort only)."""
    cleaned = _EVENT_HANDLER.sub("", selector)
    cleaned = _JS_SCHEME.sub("", cleaned)
    return cleaned.strip()


async def extract_text(page: RenderPage, selector: str) -> Optional[str]:
    """Return the text of the first element matching selector.

    Returns:
        Text content, or None when nothing matches
    """
    element = await page.query(sanitize_selector(selector))
    if element is None:
        return None
    return await element.get_text()


async def extract_attribute(page: RenderPage, selector: str, attr_name: str) -> Optional[str]:
    """Return an attribute of the first element matching selector.

    Returns:
        Attribute value, or None when nothing matches or it is absent
    """
    element = await page.query(sanitize_selector(selector))
    if element is None:
        return None
    return await element.get_attribute(attr_name)


async def resolve_image_url(element: RenderElement) -> Optional[str]:
    """Resolve an image URL from an element.

    Fallback order: ``src``, then ``data-src`` (lazy loading), then the
    first URL of ``srcset``.
    """
    src = await element.get_attribute("src")
    if src:
        return src

    data_src = await element.get_attribute("data-src")
    if data_src:
        return data_src

    srcset = await element.get_attribute("srcset")
    if srcset:
        first_entry = srcset.split(",")[0].strip()
        if first_entry:
            return first_entry.split()[0]

    return None


async def extract_image_url(page: RenderPage, selector: str) -> Optional[str]:
    """Locate an image element and resolve its URL."""
    element = await page.query(sanitize_selector(selector))
    if element is None:
        logger.debug("image_element_missing", selector=selector)
        return None
    return await resolve_image_url(element)
