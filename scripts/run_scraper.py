"""Manual scraper runner for testing and debugging selectors.

Scrapes one page with a real browser and prints what was extracted, so
selectors can be checked before they are registered with the scheduler.

Usage:
    python scripts/run_scraper.py https://shop.example.com/item --price ".price"
    python scripts/run_scraper.py https://shop.example.com/item --price ".price" \
        --name "h1" --image "img.main" --wait ".price" --headful
"""

import argparse
import asyncio
import sys

from price_scraper.config import settings
from price_scraper.scrapers.base import ScraperConfig, ScrapeTarget
from price_scraper.scrapers.scraper import PriceScraper


async def run_scraper(args: argparse.Namespace) -> int:
    """Scrape the page described by args and print the result.

    Returns:
        Process exit code
    """
    target = ScrapeTarget(
        url=args.url,
        price_selector=args.price,
        name_selector=args.name,
        image_selector=args.image,
        currency=args.currency,
    )
    config = ScraperConfig.from_settings(
        timeout_ms=args.timeout,
        wait_for_selector=args.wait,
        headless=not args.headful,
    )
    scraper = PriceScraper(retry_base_delay_ms=settings.RETRY_BASE_DELAY_MS)

    print(f"\n{'='*70}")
    print(f"  Scraping {target.url}")
    print(f"{'='*70}\n")

    try:
        result = await scraper.scrape_with_retry(target, config, max_retries=args.retries)
    except Exception as e:
        print(f"❌ {type(e).__name__}: {e}\n")
        return 1
    finally:
        await scraper.close()

    print(f"  💰 Price:    {result.amount} {result.currency_code}")
    print(f"  🧾 Raw text: {result.raw_price_text!r}")
    if result.product_name:
        print(f"  🏷️  Name:     {result.product_name}")
    if result.image_url:
        print(f"  🖼️  Image:    {result.image_url}")
    print()
    return 0


def main():
    """Parse arguments and run the scraper."""
    parser = argparse.ArgumentParser(
        description="Scrape one product page with CSS selectors",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("url", help="Absolute http(s) URL of the product page")
    parser.add_argument("--price", required=True, help="CSS selector of the price element")
    parser.add_argument("--name", help="CSS selector of the product name")
    parser.add_argument("--image", help="CSS selector of the product image")
    parser.add_argument("--currency", help="Currency assumed when the price text names none")
    parser.add_argument("--wait", help="Selector to wait for after the page loads")
    parser.add_argument("--timeout", type=int, help="Navigation timeout in milliseconds")
    parser.add_argument(
        "--retries",
        type=int,
        default=settings.MAX_RETRIES,
        help=f"Attempts before giving up (default: {settings.MAX_RETRIES})",
    )
    parser.add_argument("--headful", action="store_true", help="Show the browser window")

    args = parser.parse_args()
    sys.exit(asyncio.run(run_scraper(args)))


if __name__ == "__main__":
    main()
