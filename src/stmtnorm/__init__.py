"""
stmtnorm - bank statement normalization.

Turns heterogeneous statement text (CSV exports, PDF-extracted text,
"Key: value" blocks) into a canonical list of transactions, and serializes
them back to CSV.

Usage:
    import stmtnorm

    transactions, error = stmtnorm.parse(raw_text)
    if error:
        raise error
    csv_text = stmtnorm.serialize(transactions)
"""

from stmtnorm.core.config import NormalizerConfig, load_config
from stmtnorm.core.exceptions import (
    ConfigurationError,
    EmptyInputError,
    FormatUnrecognizedError,
    StatementReadError,
    StmtNormError,
    ValidationError,
)
from stmtnorm.core.models import HeaderStructure, ParseResult, Transaction
from stmtnorm.exporters.csv_writer import serialize
from stmtnorm.normalizers import classify, detect_currency, normalize_amount, normalize_date
from stmtnorm.parsers.dispatcher import (
    StatementNormalizer,
    analyze_structure,
    parse,
    validate_format,
)
from stmtnorm.parsers.headers import detect_header_structure

__version__ = "0.1.0"

__all__ = [
    "parse",
    "serialize",
    "validate_format",
    "analyze_structure",
    "StatementNormalizer",
    "NormalizerConfig",
    "load_config",
    "Transaction",
    "HeaderStructure",
    "ParseResult",
    "StmtNormError",
    "FormatUnrecognizedError",
    "EmptyInputError",
    "ValidationError",
    "ConfigurationError",
    "StatementReadError",
    "classify",
    "detect_currency",
    "normalize_amount",
    "normalize_date",
    "detect_header_structure",
]
