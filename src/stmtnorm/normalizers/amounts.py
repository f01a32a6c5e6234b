"""
Amount and currency normalization.

Turns raw amount cells such as "($45.00)", "₦3,000.00", "+1.234.567.89" or
"5,000.00 DR" into signed Decimals, and works out the currency code from an
explicit currency column or the symbols embedded in the token.

An unparsable amount normalizes to Decimal("0"), never NaN.
"""

import logging
import re
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from typing import Optional, Tuple

from stmtnorm.core.config import DEFAULT_CONFIG, NormalizerConfig

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

DEBIT_CREDIT_SUFFIX = re.compile(r"\s*(?<![A-Za-z])(CR|DR)\.?\s*$", re.IGNORECASE)
LEADING_NUMBER = re.compile(r"^(\d+\.?\d*|\.\d+)")


@lru_cache(maxsize=32)
def _code_pattern(codes: Tuple[str, ...]) -> Optional["re.Pattern"]:
    if not codes:
        return None
    alternatives = "|".join(re.escape(c) for c in sorted(codes, key=len, reverse=True))
    return re.compile(rf"(?<![A-Za-z])({alternatives})(?![A-Za-z])")


@lru_cache(maxsize=32)
def amount_pattern(symbols: Tuple[str, ...]) -> str:
    """
    Regex fragment matching one amount-shaped token.

    Accepts an optional sign, parentheses, currency symbol and thousands
    separators, e.g. "-$1,234.56", "(45.00)", "₹500".
    """
    symbol_alt = "|".join(re.escape(s) for s in sorted(symbols, key=len, reverse=True))
    symbol_part = rf"(?:(?:{symbol_alt})\s?)?" if symbol_alt else ""
    return rf"[-+]?\(?[-+]?{symbol_part}[-+]?\d[\d,]*(?:\.\d+)?\)?"


def config_amount_pattern(config: Optional[NormalizerConfig] = None) -> str:
    config = config or DEFAULT_CONFIG
    return amount_pattern(tuple(symbol for symbol, _ in config.currency_symbols))


def is_amount_token(token: str, config: Optional[NormalizerConfig] = None) -> bool:
    """Check whether a token looks like a monetary amount."""
    if not token or not isinstance(token, str):
        return False
    return re.fullmatch(config_amount_pattern(config), token.strip()) is not None


def _strip_currency(text: str, config: NormalizerConfig) -> str:
    for symbol, _ in config.currency_symbols:
        text = text.replace(symbol, "")
    pattern = _code_pattern(tuple(config.currency_codes))
    if pattern is not None:
        text = pattern.sub("", text.upper())
    return text


def _collapse_decimal_points(text: str) -> str:
    """Treat all but the last '.' as thousands separators."""
    if text.count(".") <= 1:
        return text
    head, _, tail = text.rpartition(".")
    return head.replace(".", "") + "." + tail


def normalize_amount(token, config: Optional[NormalizerConfig] = None) -> Decimal:
    """
    Parse a raw amount token into a signed Decimal.

    A '-' anywhere, parenthesis wrapping or a trailing "DR" marks a negative
    (outflow) amount; a trailing "CR" marks a credit.

    Args:
        token: Raw amount text (numbers are accepted as-is)
        config: Optional config for currency symbols and codes

    Returns:
        Signed Decimal, or Decimal("0") when the token is not numeric
    """
    if isinstance(token, bool) or token is None:
        return ZERO
    if isinstance(token, (int, float, Decimal)):
        value = Decimal(str(token))
        return value if value.is_finite() else ZERO
    if not isinstance(token, str):
        return ZERO

    original = token
    text = token.strip()
    if not text:
        logger.debug("Empty amount string")
        return ZERO

    config = config or DEFAULT_CONFIG

    marker = None
    suffix = DEBIT_CREDIT_SUFFIX.search(text)
    if suffix:
        marker = suffix.group(1).upper()
        text = text[:suffix.start()]

    text = _strip_currency(text, config)
    text = re.sub(r"[,\s]", "", text)

    negative = "-" in text or text.startswith("(") or text.endswith(")")
    text = re.sub(r"[-()]", "", text)
    text = text.lstrip("+")
    text = _collapse_decimal_points(text)

    match = LEADING_NUMBER.match(text)
    if not match:
        logger.debug(f"Failed to parse amount: {original!r} -> cleaned: {text!r}")
        return ZERO

    try:
        value = Decimal(match.group(1))
    except InvalidOperation:
        logger.debug(f"Failed to parse amount: {original!r}")
        return ZERO

    if marker == "DR":
        negative = True
    elif marker == "CR":
        negative = False

    if negative and value != ZERO:
        value = -value
    return value


def detect_currency(
    text: Optional[str],
    currency_column: Optional[str] = None,
    config: Optional[NormalizerConfig] = None,
) -> str:
    """
    Work out the ISO currency code for an amount.

    Args:
        text: Raw amount text (or any text around it)
        currency_column: Value of an explicit currency column, if present
        config: Optional config for symbol table and default currency

    Returns:
        Currency code, the configured default (USD) when undetectable
    """
    config = config or DEFAULT_CONFIG

    if currency_column and currency_column.strip():
        return currency_column.strip().upper()

    text = text or ""
    for symbol, code in config.currency_symbols:
        if symbol in text:
            return code

    pattern = _code_pattern(tuple(config.currency_codes))
    if pattern is not None:
        match = pattern.search(text)
        if match:
            return match.group(1)

    return config.default_currency.strip().upper()
