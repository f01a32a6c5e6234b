"""
Leaf normalizers shared by all parse strategies.

- dates: normalize_date, resolve_ambiguous_day_month
- amounts: normalize_amount, detect_currency
- categories: classify, Category
"""

from stmtnorm.normalizers.amounts import detect_currency, is_amount_token, normalize_amount
from stmtnorm.normalizers.categories import (
    CATEGORY_LABELS,
    Category,
    classify,
    is_known_category,
)
from stmtnorm.normalizers.dates import (
    expand_two_digit_year,
    normalize_date,
    resolve_ambiguous_day_month,
)

__all__ = [
    "detect_currency",
    "is_amount_token",
    "normalize_amount",
    "CATEGORY_LABELS",
    "Category",
    "classify",
    "is_known_category",
    "expand_two_digit_year",
    "normalize_date",
    "resolve_ambiguous_day_month",
]
