"""
Date normalization for statement date tokens.

Converts the date encodings seen across bank exports into zero-padded
YYYY-MM-DD strings. Shapes are tried in a fixed priority order:

1. ISO YYYY-MM-DD (also / and . separators)
2. DD/MM/YYYY or MM/DD/YYYY (ambiguous, see resolve_ambiguous_day_month)
3. DD/MM/YY or MM/DD/YY (two-digit year, pivot 50)
4. DD-MMM-YYYY, DD MMM YYYY (month names, 3-letter or full)
5. MMM DD, YYYY
6. Generic calendar parse via pandas for anything else carrying a 4-digit year

Usage:
    from stmtnorm.normalizers.dates import normalize_date

    normalize_date("13/01/2024")   # "2024-01-13"
    normalize_date("May 1, 2024")  # "2024-05-01"
    normalize_date("not a date")   # None
"""

import logging
import re
import warnings
from datetime import date
from typing import Optional, Tuple

import pandas as pd

from stmtnorm.core.config import DEFAULT_CONFIG, MONTH_NAMES, NormalizerConfig

logger = logging.getLogger(__name__)

ISO_PATTERN = re.compile(r"^(\d{4})[/\-.](\d{1,2})[/\-.](\d{1,2})$")
NUMERIC_PATTERN = re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})$")
NUMERIC_SHORT_PATTERN = re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{2})$")
DAY_MONTH_NAME_PATTERN = re.compile(
    r"^(\d{1,2})(?:st|nd|rd|th)?[\s\-/]+([A-Za-z]{3,9})\.?,?[\s\-/]+(\d{4}|\d{2})$"
)
MONTH_NAME_DAY_PATTERN = re.compile(
    r"^([A-Za-z]{3,9})\.?[\s\-]+(\d{1,2})(?:st|nd|rd|th)?,?\s+(\d{4}|\d{2})$"
)
FOUR_DIGIT_YEAR = re.compile(r"(?<!\d)\d{4}(?!\d)")


def resolve_ambiguous_day_month(first: int, second: int, month_first: bool = True) -> Tuple[int, int]:
    """
    Decide which of two numeric date parts is the month.

    Whichever part exceeds 12 must be the day. When neither does the input
    is genuinely ambiguous and the configured convention decides
    (month-first, the US convention, by default). This is a heuristic, not a
    guarantee: 03/04/2024 is read as March 4th unless day_first is configured.

    Args:
        first: Leading numeric part
        second: Middle numeric part
        month_first: Convention for the ambiguous case

    Returns:
        Tuple of (month, day)
    """
    if first > 12:
        return second, first
    if second > 12:
        return first, second
    if month_first:
        return first, second
    return second, first


def expand_two_digit_year(year: int, pivot: int = 50) -> int:
    """Map a two-digit year to a full year: below pivot -> 20xx, else 19xx."""
    if year >= 100:
        return year
    return 2000 + year if year < pivot else 1900 + year


def month_from_name(name: str) -> Optional[int]:
    """Look up a month by 3-letter or full name, case-insensitive."""
    return MONTH_NAMES.get(name.strip().rstrip(".").lower())


def _build(year: int, month: int, day: int) -> Optional[str]:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def _from_shapes(token: str, config: NormalizerConfig) -> Tuple[bool, Optional[str]]:
    """Try the fixed shapes. Returns (matched, result)."""
    match = ISO_PATTERN.match(token)
    if match:
        year, month, day = (int(p) for p in match.groups())
        return True, _build(year, month, day)

    match = NUMERIC_PATTERN.match(token)
    if match:
        first, second, year = (int(p) for p in match.groups())
        month, day = resolve_ambiguous_day_month(first, second, config.month_first)
        return True, _build(year, month, day)

    match = NUMERIC_SHORT_PATTERN.match(token)
    if match:
        first, second, year = (int(p) for p in match.groups())
        month, day = resolve_ambiguous_day_month(first, second, config.month_first)
        return True, _build(expand_two_digit_year(year, config.pivot_year), month, day)

    match = DAY_MONTH_NAME_PATTERN.match(token)
    if match:
        month = month_from_name(match.group(2))
        if month is not None:
            year = expand_two_digit_year(int(match.group(3)), config.pivot_year)
            return True, _build(year, month, int(match.group(1)))

    match = MONTH_NAME_DAY_PATTERN.match(token)
    if match:
        month = month_from_name(match.group(1))
        if month is not None:
            year = expand_two_digit_year(int(match.group(3)), config.pivot_year)
            return True, _build(year, month, int(match.group(2)))

    return False, None


def _generic_parse(token: str, config: NormalizerConfig) -> Optional[str]:
    # Bare numbers and fragments make dateutil invent dates, so require a year
    if not FOUR_DIGIT_YEAR.search(token):
        return None
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        try:
            parsed = pd.to_datetime(token, errors="coerce", dayfirst=not config.month_first)
        except (ValueError, TypeError, OverflowError):
            return None
    if parsed is None or pd.isna(parsed):
        return None
    return parsed.date().isoformat()


def normalize_date(token: Optional[str], config: Optional[NormalizerConfig] = None) -> Optional[str]:
    """
    Normalize a raw date token to YYYY-MM-DD.

    Never raises for bad input; callers must discard the candidate
    transaction when this returns None.

    Args:
        token: Raw date text
        config: Optional config (date convention and pivot year)

    Returns:
        ISO date string, or None if the token is not a valid calendar date
    """
    if token is None or not isinstance(token, str):
        return None

    cleaned = token.strip().strip('"').strip()
    if not cleaned:
        logger.debug("Empty date string")
        return None

    config = config or DEFAULT_CONFIG
    matched, result = _from_shapes(cleaned, config)
    if matched:
        if result is None:
            logger.debug(f"Date shape matched but not a calendar date: {cleaned!r}")
        return result

    result = _generic_parse(cleaned, config)
    if result:
        logger.debug(f"Date parsed (fallback): {cleaned!r} -> {result}")
    else:
        logger.debug(f"Failed to parse date: {cleaned!r}")
    return result
