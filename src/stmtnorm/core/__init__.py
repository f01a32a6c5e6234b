"""
Core module - Foundation components for stmtnorm.

Provides:
- Transaction / HeaderStructure / ParseResult models
- NormalizerConfig: lookup tables and policy switches
- StmtNormError hierarchy
"""

from stmtnorm.core.config import (
    DEFAULT_CONFIG,
    NormalizerConfig,
    create_default_config,
    load_config,
)
from stmtnorm.core.exceptions import (
    ConfigurationError,
    EmptyInputError,
    FormatUnrecognizedError,
    StatementReadError,
    StmtNormError,
    ValidationError,
)
from stmtnorm.core.models import (
    HeaderStructure,
    IssueKind,
    ParseIssue,
    ParseResult,
    Transaction,
)

__all__ = [
    "DEFAULT_CONFIG",
    "NormalizerConfig",
    "create_default_config",
    "load_config",
    "ConfigurationError",
    "EmptyInputError",
    "FormatUnrecognizedError",
    "StatementReadError",
    "StmtNormError",
    "ValidationError",
    "HeaderStructure",
    "IssueKind",
    "ParseIssue",
    "ParseResult",
    "Transaction",
]
