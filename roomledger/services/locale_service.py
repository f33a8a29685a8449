"""Locale-aware formatting of money and months for reports.

Uses babel; the currency is derived from the LOCALE territory.

Configuration:
    LOCALE env var (default: en_IN) - determines currency and number formatting

Example:
    >>> from roomledger.services.locale_service import format_amount
    >>> format_amount(150000)
    '₹1,50,000'
"""

import logging
import os
from datetime import date

from babel import Locale, UnknownLocaleError
from babel.dates import format_date as babel_format_date
from babel.numbers import (
    format_decimal as babel_format_decimal,
)
from babel.numbers import (
    get_currency_symbol as babel_get_currency_symbol,
)
from babel.numbers import (
    get_territory_currencies,
)

logger = logging.getLogger(__name__)

# Default locale if LOCALE env var is invalid or missing
DEFAULT_LOCALE = "en_IN"
DEFAULT_CURRENCY = "INR"


def _get_locale(locale_str: str | None = None) -> str:
    """Validate a locale (LOCALE env var by default), falling back to en_IN."""
    if locale_str is None:
        locale_str = os.getenv("LOCALE", DEFAULT_LOCALE)
    try:
        Locale.parse(locale_str)
        return locale_str
    except (UnknownLocaleError, ValueError) as e:
        logger.warning(f"Invalid LOCALE '{locale_str}': {e}. Falling back to '{DEFAULT_LOCALE}'")
        return DEFAULT_LOCALE


def _get_currency_from_locale(locale_str: str) -> str:
    """Derive currency code from locale territory.

    Args:
        locale_str: Locale string (e.g., 'en_IN')

    Returns:
        Currency code (e.g., 'INR')
    """
    try:
        locale = Locale.parse(locale_str)
        territory = locale.territory
        if territory:
            currencies = get_territory_currencies(territory)
            if currencies:
                return currencies[0]
    except (UnknownLocaleError, ValueError) as e:
        logger.warning(f"Could not derive currency from locale '{locale_str}': {e}")

    return DEFAULT_CURRENCY


# Module-level settings, replaced by configure_locale()
LOCALE = _get_locale()
CURRENCY = _get_currency_from_locale(LOCALE)


def configure_locale(locale_str: str) -> None:
    """Switch formatting to another locale, e.g. AppConfig.locale."""
    global LOCALE, CURRENCY

    LOCALE = _get_locale(locale_str)
    CURRENCY = _get_currency_from_locale(LOCALE)
    logger.debug(f"Locale set to {LOCALE} ({CURRENCY})")


def get_currency_symbol() -> str:
    """Get currency symbol for current locale (e.g., '₹')."""
    return babel_get_currency_symbol(CURRENCY, locale=LOCALE)


def format_amount(amount: int, include_symbol: bool = True) -> str:
    """Format a whole-unit monetary amount according to locale.

    Amounts are integers, so no fraction digits are shown.

    Args:
        amount: Amount in whole currency units (may be negative)
        include_symbol: Whether to include currency symbol (default True)

    Returns:
        Formatted currency string (e.g., '₹8,000', '-₹1,200')
    """
    number = babel_format_decimal(abs(amount), locale=LOCALE)
    sign = "-" if amount < 0 else ""
    if include_symbol:
        return f"{sign}{get_currency_symbol()}{number}"
    return f"{sign}{number}"


def format_month_label(month: date) -> str:
    """Human-readable month label (e.g., 'June 2024')."""
    return babel_format_date(month, format="MMMM yyyy", locale=LOCALE)


__all__ = [
    "LOCALE",
    "CURRENCY",
    "configure_locale",
    "get_currency_symbol",
    "format_amount",
    "format_month_label",
]
