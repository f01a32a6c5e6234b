"""
Keyword-based category classification for transaction descriptions.

Rules are an ordered tuple of (keywords, label) pairs taken from the
normalizer config; the first rule with a keyword contained in the lowercased
description wins, otherwise the transaction is Miscellaneous.
"""

from enum import Enum
from typing import Optional, Sequence, Tuple

from stmtnorm.core.config import DEFAULT_CONFIG, FALLBACK_CATEGORY

CategoryRules = Sequence[Tuple[Sequence[str], str]]


class Category(Enum):
    """Fixed category labels produced by the classifier."""

    SALARY = "Salary"
    RENT = "Rent"
    GROCERIES = "Groceries"
    TRANSPORT = "Transport"
    UTILITIES = "Utilities"
    DINING = "Dining"
    SUBSCRIPTIONS = "Subscriptions"
    SHOPPING = "Shopping"
    FITNESS = "Fitness"
    OTHER_INCOME = "Other Income"
    MISCELLANEOUS = FALLBACK_CATEGORY


CATEGORY_LABELS = tuple(c.value for c in Category)


def is_known_category(label: str) -> bool:
    """Check if a label is one of the fixed category labels."""
    return label in CATEGORY_LABELS


def classify(description: Optional[str], rules: Optional[CategoryRules] = None) -> str:
    """
    Infer a category label from a transaction description.

    Args:
        description: Transaction description
        rules: Ordered (keywords, label) rules; defaults to the built-in table

    Returns:
        Category label, "Miscellaneous" when no rule matches
    """
    if not description:
        return FALLBACK_CATEGORY

    if rules is None:
        rules = DEFAULT_CONFIG.category_rules

    desc = description.lower()
    for keywords, label in rules:
        if any(kw.lower() in desc for kw in keywords):
            return label

    return FALLBACK_CATEGORY
