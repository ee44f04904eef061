"""Price text normalization.

Turns free-form price strings such as ``"$1,234.50"``, ``"99.99 EUR"`` or
``"₹ 4,999"`` into a float amount and an ISO 4217 currency code.
"""

import re
from dataclasses import dataclass
from typing import List, Tuple

import structlog

from price_scraper.core.exceptions import ParseError

logger = structlog.get_logger(__name__)


# Checked in this order; the first symbol present anywhere in the text wins.
CURRENCY_SYMBOLS: List[Tuple[str, str]] = [
    ("$", "USD"),
    ("€", "EUR"),
    ("£", "GBP"),
    ("¥", "JPY"),
    ("₹", "INR"),
    ("₽", "RUB"),
    ("₩", "KRW"),
]

CURRENCY_CODES = ("USD", "EUR", "GBP", "JPY", "INR", "RUB", "KRW", "CAD", "AUD", "CHF")

DEFAULT_CURRENCY = "USD"

_CODE_PATTERN = re.compile(r"\b(" + "|".join(CURRENCY_CODES) + r")\b", re.IGNORECASE)
_NON_NUMERIC = re.compile(r"[^\d.\-]")
# Leading float literal, read the same lenient way a browser's parseFloat would
_LEADING_NUMBER = re.compile(r"^-?(?:\d+\.?\d*|\.\d+)")


@dataclass(frozen=True)
class NormalizedPrice:
    """Numeric amount plus ISO currency code."""

    amount: float
    currency_code: str


class PriceNormalizer:
    """Price string parsing utilities."""

    @staticmethod
    def detect_currency(text: str, default: str = DEFAULT_CURRENCY) -> Tuple[str, str]:
        """Detect the currency of a price string and strip its marker.

        An explicit ISO code token overrides any currency symbol.

        Args:
            text: Trimmed price string
            default: Currency code used when nothing is detected

        Returns:
            Tuple of (currency_code, remaining_text)
        """
        currency = default
        remaining = text

        for symbol, code in CURRENCY_SYMBOLS:
            if symbol in text:
                currency = code
                remaining = text.replace(symbol, "", 1).strip()
                break

        match = _CODE_PATTERN.search(text)
        if match:
            currency = match.group(1).upper()
            remaining = _CODE_PATTERN.sub("", remaining, count=1).strip()

        return currency, remaining

    @staticmethod
    def clean_price_string(raw: str) -> str:
        """Drop thousands separators and everything but digits, '.' and '-'.

        Examples:
            "1,234.56" -> "1234.56"
            "USD 99.99" -> "99.99"
        """
        return _NON_NUMERIC.sub("", raw.replace(",", ""))

    @classmethod
    def normalize(cls, raw_text: str, default_currency: str = DEFAULT_CURRENCY) -> NormalizedPrice:
        """Parse a price string into an amount and currency code.

        Args:
            raw_text: Price text as extracted from the page
            default_currency: Currency assumed when the text names none

        Returns:
            NormalizedPrice

        Raises:
            ParseError: If the text is empty or holds no numeric value
        """
        if raw_text is None or not raw_text.strip():
            raise ParseError("Price text is empty")

        text = raw_text.strip()
        currency, remaining = cls.detect_currency(text, default_currency.upper())
        cleaned = cls.clean_price_string(remaining)

        match = _LEADING_NUMBER.match(cleaned)
        if not match:
            raise ParseError(f"Could not parse price from: {raw_text}")

        amount = float(match.group(0))
        logger.debug("price_normalized", raw=text, amount=amount, currency=currency)
        return NormalizedPrice(amount=amount, currency_code=currency)


def normalize_price(raw_text: str, default_currency: str = DEFAULT_CURRENCY) -> NormalizedPrice:
    """Module-level shortcut for PriceNormalizer.normalize."""
    return PriceNormalizer.normalize(raw_text, default_currency)
