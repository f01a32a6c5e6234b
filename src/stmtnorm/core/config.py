"""
Normalizer configuration - lookup tables and policy switches.

All keyword, synonym and symbol tables used by the pipeline live here as
immutable data, so they can be extended or localized without touching the
parsing logic. A JSON file can extend the defaults:

Usage:
    from stmtnorm.core.config import load_config

    config = load_config("~/.config/stmtnorm.json")
    result = StatementNormalizer(config).parse(text)

Example config file:
    {
        "header_synonyms": {"description": ["beneficiary"]},
        "category_rules": [{"label": "Dining", "keywords": ["swiggy", "zomato"]}],
        "default_currency": "INR",
        "date_convention": "day_first"
    }
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from stmtnorm.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "STMTNORM_CONFIG"

# Semantic fields detected from header rows, in detection order
HEADER_FIELDS = (
    "date", "description", "debit", "credit", "amount", "category",
    "balance", "reference", "time", "currency", "status",
)

DEFAULT_HEADER_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    "date": (
        "date", "trans date", "transaction date", "value date", "posting date",
        "trans. date", "txn date", "effective date", "process date", "transaction_date",
        "trans_date", "posting_date", "value_date", "effective_date",
    ),
    "description": (
        "description", "remarks", "narration", "transaction details", "details",
        "memo", "reference", "particulars", "transaction description", "desc",
        "name/description", "name", "merchant", "payee", "transaction_details",
        "transaction_description", "detail", "narrative",
    ),
    "debit": (
        "debit", "debit amount", "withdrawal", "outgoing", "paid out",
        "debits", "debit amt", "withdrawal amount", "outflow", "withdrawals",
        "money out", "money_out", "debit_amount", "withdrawal_amount",
        "outgoing_amount", "spent", "expense",
    ),
    "credit": (
        "credit", "credit amount", "deposit", "incoming", "paid in",
        "credits", "credit amt", "deposit amount", "inflow", "deposits",
        "money in", "money_in", "credit_amount", "deposit_amount",
        "incoming_amount", "received", "income",
    ),
    "amount": (
        "amount", "transaction amount", "txn amount", "amt", "value",
        "transaction_amount", "txn_amount", "net_amount", "total",
    ),
    "category": (
        "category", "type", "transaction type", "classification", "class",
        "transaction_type", "category_type", "expense_type",
    ),
    "balance": (
        "balance", "running balance", "account balance", "current balance",
        "balance_amount", "running_balance", "account_balance",
    ),
    "reference": (
        "reference", "ref", "transaction ref", "reference number", "ref no",
        "transaction_ref", "ref_no", "reference_number",
    ),
    "time": ("time", "timestamp", "transaction time", "time_stamp"),
    "currency": ("currency", "curr", "currency_code"),
    "status": ("status", "transaction status", "state", "transaction_status"),
}

# Multi-character symbols are listed first; detection scans in this order
DEFAULT_CURRENCY_SYMBOLS: Tuple[Tuple[str, str], ...] = (
    ("C$", "CAD"),
    ("A$", "AUD"),
    ("R$", "BRL"),
    ("$", "USD"),
    ("£", "GBP"),
    ("€", "EUR"),
    ("¥", "JPY"),
    ("₹", "INR"),
    ("₽", "RUB"),
    ("₩", "KRW"),
    ("₦", "NGN"),
    ("₵", "GHS"),
    ("₨", "PKR"),
)

DEFAULT_CURRENCY_CODES: Tuple[str, ...] = (
    "USD", "GBP", "EUR", "JPY", "INR", "RUB", "KRW", "CAD", "AUD", "BRL",
    "NGN", "GHS", "PKR", "CHF", "CNY", "ZAR", "KES", "MXN", "SGD", "NZD",
)

MONTH_NAMES: Dict[str, int] = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "sept": 9, "oct": 10, "nov": 11, "dec": 12,
    "january": 1, "february": 2, "march": 3, "april": 4, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11,
    "december": 12,
}

# Ordered (keywords, label) rules; first match wins
DEFAULT_CATEGORY_RULES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("salary", "wage", "income", "payroll", "direct dep", "monthly pay", "salary payment"), "Salary"),
    (("rent", "mortgage", "housing", "monthly rent"), "Rent"),
    (("grocery", "supermarket", "food store", "walmart", "target", "whole foods", "kroger"), "Groceries"),
    (("uber", "taxi", "transport", "gas", "fuel", "metro", "lyft", "gas station"), "Transport"),
    (("electric", "water", "utility", "internet", "phone", "electricity bill", "water bill",
      "internet subscription"), "Utilities"),
    (("restaurant", "dining", "cafe", "pizza", "mcdonald", "starbucks", "chipotle"), "Dining"),
    (("netflix", "spotify", "subscription", "monthly", "amazon prime", "youtube premium"), "Subscriptions"),
    (("gym", "fitness", "yoga", "gym membership", "yoga class"), "Fitness"),
    (("amazon", "ebay", "shopping", "target", "walmart"), "Shopping"),
    (("bonus", "gift", "freelance", "other income", "gift received", "freelance payment"), "Other Income"),
)

FALLBACK_CATEGORY = "Miscellaneous"

DATE_CONVENTIONS = ("month_first", "day_first")


@dataclass(frozen=True)
class NormalizerConfig:
    """
    Immutable configuration for the normalization pipeline.

    Loaded from a JSON file or dict; unspecified keys keep the defaults.
    """
    header_synonyms: Dict[str, Tuple[str, ...]] = field(
        default_factory=lambda: dict(DEFAULT_HEADER_SYNONYMS)
    )
    currency_symbols: Tuple[Tuple[str, str], ...] = DEFAULT_CURRENCY_SYMBOLS
    currency_codes: Tuple[str, ...] = DEFAULT_CURRENCY_CODES
    category_rules: Tuple[Tuple[Tuple[str, ...], str], ...] = DEFAULT_CATEGORY_RULES
    default_currency: str = "USD"
    # Used only when both day and month parts are <= 12
    date_convention: str = "month_first"
    # Two-digit years below the pivot map to 20xx, the rest to 19xx
    pivot_year: int = 50

    def __post_init__(self):
        if self.date_convention not in DATE_CONVENTIONS:
            raise ConfigurationError(
                f"date_convention must be one of {DATE_CONVENTIONS}, got {self.date_convention!r}",
                key="date_convention",
            )
        if not 0 <= self.pivot_year <= 99:
            raise ConfigurationError(
                f"pivot_year must be between 0 and 99, got {self.pivot_year}",
                key="pivot_year",
            )
        code = self.default_currency
        if not isinstance(code, str) or len(code.strip()) != 3 or not code.strip().isalpha():
            raise ConfigurationError(
                f"default_currency must be a 3-letter code, got {code!r}",
                key="default_currency",
            )
        unknown = set(self.header_synonyms) - set(HEADER_FIELDS)
        if unknown:
            raise ConfigurationError(
                f"Unknown header fields: {', '.join(sorted(unknown))}",
                key="header_synonyms",
            )

    @property
    def month_first(self) -> bool:
        return self.date_convention == "month_first"

    def synonyms_for(self, field_name: str) -> Tuple[str, ...]:
        """Get header synonyms for a semantic field."""
        return tuple(self.header_synonyms.get(field_name, ()))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NormalizerConfig":
        """
        Create config from dictionary.

        Lists in the dictionary replace the defaults; use merge_with() to
        extend them instead.
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Config must be a JSON object")

        defaults = cls()
        synonyms = dict(defaults.header_synonyms)
        for field_name, values in (data.get("header_synonyms") or {}).items():
            synonyms[field_name] = tuple(str(v) for v in values)

        symbols = defaults.currency_symbols
        if "currency_symbols" in data:
            symbols = _symbols_from_mapping(data["currency_symbols"])

        rules = defaults.category_rules
        if "category_rules" in data:
            rules = _rules_from_list(data["category_rules"])

        try:
            pivot_year = int(data.get("pivot_year", defaults.pivot_year))
        except (TypeError, ValueError):
            raise ConfigurationError("pivot_year must be an integer", key="pivot_year")

        return cls(
            header_synonyms=synonyms,
            currency_symbols=symbols,
            currency_codes=tuple(
                str(c).upper() for c in data.get("currency_codes", defaults.currency_codes)
            ),
            category_rules=rules,
            default_currency=str(data.get("default_currency", defaults.default_currency)).upper(),
            date_convention=data.get("date_convention", defaults.date_convention),
            pivot_year=pivot_year,
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "NormalizerConfig":
        """Load config from a JSON file, extending the defaults."""
        path = Path(path).expanduser()
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ConfigurationError(f"Config file not found: {path}")
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {path}: {e}")

        logger.debug(f"Loaded normalizer config from {path}")
        return cls().merge_with(cls.from_dict(data), extend_from=data)

    def merge_with(
        self,
        override: "NormalizerConfig",
        extend_from: Optional[Dict[str, Any]] = None,
    ) -> "NormalizerConfig":
        """
        Merge with another config.

        Synonyms, symbols and currency codes are extended (override entries
        first); category rules from the override are evaluated before the
        existing ones; scalar settings come from the override.

        Args:
            override: Config whose settings take precedence
            extend_from: Raw dict the override was built from; when given,
                only the keys it names are merged in

        Returns:
            New merged NormalizerConfig
        """
        keys = set(extend_from) if extend_from is not None else None

        def wants(key: str) -> bool:
            return keys is None or key in keys

        synonyms = dict(self.header_synonyms)
        if wants("header_synonyms"):
            named = (extend_from or {}).get("header_synonyms") if keys is not None else None
            for field_name, values in override.header_synonyms.items():
                if named is not None and field_name not in named:
                    continue
                synonyms[field_name] = _unique(tuple(values) + synonyms.get(field_name, ()))

        symbols = self.currency_symbols
        if wants("currency_symbols"):
            symbols = _unique(override.currency_symbols + self.currency_symbols)
            symbols = tuple(sorted(symbols, key=lambda pair: -len(pair[0])))

        codes = self.currency_codes
        if wants("currency_codes"):
            codes = _unique(override.currency_codes + self.currency_codes)

        rules = self.category_rules
        if wants("category_rules"):
            rules = _unique(override.category_rules + self.category_rules)

        return NormalizerConfig(
            header_synonyms=synonyms,
            currency_symbols=symbols,
            currency_codes=codes,
            category_rules=rules,
            default_currency=(
                override.default_currency if wants("default_currency") else self.default_currency
            ),
            date_convention=(
                override.date_convention if wants("date_convention") else self.date_convention
            ),
            pivot_year=override.pivot_year if wants("pivot_year") else self.pivot_year,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to a JSON-compatible dict."""
        return {
            "header_synonyms": {k: list(v) for k, v in self.header_synonyms.items()},
            "currency_symbols": {symbol: code for symbol, code in self.currency_symbols},
            "currency_codes": list(self.currency_codes),
            "category_rules": [
                {"label": label, "keywords": list(keywords)}
                for keywords, label in self.category_rules
            ],
            "default_currency": self.default_currency,
            "date_convention": self.date_convention,
            "pivot_year": self.pivot_year,
        }


def _unique(items: tuple) -> tuple:
    seen = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return tuple(seen)


def _symbols_from_mapping(mapping: Any) -> Tuple[Tuple[str, str], ...]:
    if not isinstance(mapping, dict):
        raise ConfigurationError("currency_symbols must map symbol -> code", key="currency_symbols")
    pairs = [(str(symbol), str(code).upper()) for symbol, code in mapping.items() if symbol]
    # Longest symbols first so "C$" wins over "$"
    return tuple(sorted(pairs, key=lambda pair: -len(pair[0])))


def _rules_from_list(rules: Any) -> Tuple[Tuple[Tuple[str, ...], str], ...]:
    if not isinstance(rules, list):
        raise ConfigurationError("category_rules must be a list", key="category_rules")
    parsed = []
    for rule in rules:
        try:
            label = str(rule["label"]).strip()
            keywords = tuple(str(k).lower() for k in rule["keywords"])
        except (KeyError, TypeError):
            raise ConfigurationError(
                "Each category rule needs 'label' and 'keywords'", key="category_rules"
            )
        if not label or not keywords:
            raise ConfigurationError(
                "Category rules need a non-empty label and keyword list", key="category_rules"
            )
        parsed.append((keywords, label))
    return tuple(parsed)


DEFAULT_CONFIG = NormalizerConfig()


def load_config(path: Optional[Union[str, Path]] = None) -> NormalizerConfig:
    """
    Load configuration from a path or the STMTNORM_CONFIG environment variable.

    Returns the defaults when neither is set.
    """
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return DEFAULT_CONFIG
    return NormalizerConfig.from_file(path)


def create_default_config() -> Dict[str, Any]:
    """Create default normalizer config as dict (for saving to file)."""
    return DEFAULT_CONFIG.to_dict()
