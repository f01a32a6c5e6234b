"""
Statement parsers.

Strategies:
- SectionalStrategy / StructuredStrategy: "Key: value" block statements
- HeaderlessStrategy: DATE TYPE DESCRIPTION AMOUNT lines
- TabularStrategy: loosely aligned lines extracted from PDFs
- DelimitedStrategy: CSV-like text with a recognizable header row

StatementNormalizer runs all applicable strategies and deduplicates.
"""

from stmtnorm.parsers.base import ParseStrategy, StatementDocument
from stmtnorm.parsers.delimited import DelimitedStrategy
from stmtnorm.parsers.dispatcher import (
    DEFAULT_STRATEGIES,
    StatementNormalizer,
    analyze_structure,
    parse,
    validate_format,
)
from stmtnorm.parsers.fields import iter_records, split_fields
from stmtnorm.parsers.headerless import HeaderlessStrategy
from stmtnorm.parsers.headers import detect_header_structure, find_header_index
from stmtnorm.parsers.sectional import SectionalStrategy, StructuredStrategy
from stmtnorm.parsers.tabular import TabularStrategy
from stmtnorm.parsers.utils import consolidate_transactions, deduplicate

__all__ = [
    "ParseStrategy",
    "StatementDocument",
    "DelimitedStrategy",
    "HeaderlessStrategy",
    "SectionalStrategy",
    "StructuredStrategy",
    "TabularStrategy",
    "DEFAULT_STRATEGIES",
    "StatementNormalizer",
    "analyze_structure",
    "parse",
    "validate_format",
    "iter_records",
    "split_fields",
    "detect_header_structure",
    "find_header_index",
    "consolidate_transactions",
    "deduplicate",
]
