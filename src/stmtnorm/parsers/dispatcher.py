"""
Format strategy dispatcher - the parse entry point.

Runs every strategy that applies to the input, unions their candidates and
deduplicates them.

Usage:
    from stmtnorm.parsers.dispatcher import StatementNormalizer

    normalizer = StatementNormalizer()
    result = normalizer.parse(text)
    if not result.success:
        print(result.error.message)
    for txn in result.transactions:
        print(txn.date, txn.description, txn.amount)
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Type

from stmtnorm.core.config import DEFAULT_CONFIG, NormalizerConfig
from stmtnorm.core.exceptions import EmptyInputError, FormatUnrecognizedError
from stmtnorm.core.models import ParseResult
from stmtnorm.parsers.base import ParseStrategy, StatementDocument
from stmtnorm.parsers.delimited import DelimitedStrategy
from stmtnorm.parsers.headerless import HeaderlessStrategy
from stmtnorm.parsers.sectional import SectionalStrategy, StructuredStrategy, has_sectional_markers
from stmtnorm.parsers.tabular import TabularStrategy
from stmtnorm.parsers.utils import deduplicate

logger = logging.getLogger(__name__)

# Evaluation order; earlier strategies win dedup ties
DEFAULT_STRATEGIES: Sequence[Type[ParseStrategy]] = (
    SectionalStrategy,
    StructuredStrategy,
    HeaderlessStrategy,
    TabularStrategy,
    DelimitedStrategy,
)


class StatementNormalizer:
    """Parses raw statement text into canonical transactions."""

    def __init__(
        self,
        config: Optional[NormalizerConfig] = None,
        strategies: Optional[Sequence[Type[ParseStrategy]]] = None,
    ):
        """
        Initialize normalizer.

        Args:
            config: Normalizer config (defaults to built-in tables)
            strategies: Strategy classes to run, in order
        """
        self.config = config or DEFAULT_CONFIG
        self.strategies: List[ParseStrategy] = [
            cls(self.config) for cls in (strategies or DEFAULT_STRATEGIES)
        ]

    def _document(self, text: Any) -> StatementDocument:
        if text is None or not isinstance(text, str):
            raise EmptyInputError(f"Expected statement text, got {type(text).__name__}")
        if not text.strip():
            raise EmptyInputError()
        return StatementDocument.from_text(text, self.config)

    def parse(self, text: str) -> ParseResult:
        """
        Parse raw statement text.

        Args:
            text: Delimited or free-form statement text

        Returns:
            ParseResult; result.error is a FormatUnrecognizedError when no
            transaction could be extracted

        Raises:
            EmptyInputError: If text is None, not a string, or blank
        """
        document = self._document(text)
        result = ParseResult()
        candidates = []

        for strategy in self.strategies:
            if not strategy.applies_to(document):
                continue
            found = strategy.extract(document, result)
            result.strategies[strategy.NAME] = len(found)
            candidates.extend(found)
            logger.debug(f"Strategy {strategy.NAME}: {len(found)} candidates")

        result.transactions = deduplicate(candidates)

        if not result.transactions:
            result.error = self._unrecognized(document)
            logger.warning(result.error.message)
        else:
            logger.info(
                f"Parsed {result.transaction_count} transactions "
                f"({len(candidates) - result.transaction_count} duplicates removed, "
                f"{result.skipped_rows} rows skipped)"
            )

        return result

    def _unrecognized(self, document: StatementDocument) -> FormatUnrecognizedError:
        if document.looks_delimited and not document.structure.is_valid:
            return FormatUnrecognizedError(headers=list(document.headers))
        if document.structure.is_valid:
            return FormatUnrecognizedError(
                "No valid transactions found below the header row",
                headers=list(document.headers),
            )
        return FormatUnrecognizedError("No transactions found in statement text")

    def validate(self, text: str) -> bool:
        """
        Check whether text is in an acceptable statement format.

        Accepts sectional or header-less statements and delimited text whose
        header structure is valid; anything else is accepted only if some
        strategy actually extracts a transaction.
        """
        if not isinstance(text, str) or not text.strip():
            return False

        document = StatementDocument.from_text(text, self.config)
        if len(document.non_blank_lines) < 2:
            return False
        if document.structure.is_valid:
            return True
        if has_sectional_markers(document.text):
            return True
        if any(
            isinstance(s, HeaderlessStrategy) and s.applies_to(document)
            for s in self.strategies
        ):
            return True
        return self.parse(text).success

    def analyze(self, text: str) -> Optional[Dict[str, Any]]:
        """
        Describe how the text would be parsed (debugging aid).

        Returns:
            Dict with detected format, header structure, sample row and
            per-strategy candidate counts; None for blank input
        """
        if not isinstance(text, str) or not text.strip():
            return None

        document = StatementDocument.from_text(text, self.config)
        headerless = HeaderlessStrategy(self.config)
        detection = {
            "is_sectional": has_sectional_markers(document.text),
            "is_headerless": headerless.applies_to(document),
            "is_standard_csv": document.looks_delimited,
        }

        if document.structure.is_valid:
            fmt = "Standard CSV"
        elif detection["is_sectional"]:
            fmt = "Sectional"
        elif detection["is_headerless"]:
            fmt = "Headerless"
        else:
            fmt = "Unknown"

        result = self.parse(text)
        lines = document.non_blank_lines
        analysis: Dict[str, Any] = {
            "format": fmt,
            "format_detection": detection,
            "strategies": dict(result.strategies),
            "transaction_count": result.transaction_count,
            "warnings": list(result.warnings),
        }

        if document.looks_delimited:
            analysis.update({
                "delimiter": document.delimiter,
                "headers": list(document.headers),
                "detected_structure": document.structure.to_dict(),
                "sample_row": lines[1][1] if len(lines) > 1 else None,
            })
        else:
            analysis["sample_lines"] = [line for _, line in lines[:3]]

        return analysis


def parse(text: str, config: Optional[NormalizerConfig] = None) -> ParseResult:
    """
    Convenience function to parse statement text with a default normalizer.

    Args:
        text: Raw statement text
        config: Optional config

    Returns:
        ParseResult (transactions, error)
    """
    return StatementNormalizer(config).parse(text)


def validate_format(text: str, config: Optional[NormalizerConfig] = None) -> bool:
    """Convenience wrapper for StatementNormalizer.validate."""
    return StatementNormalizer(config).validate(text)


def analyze_structure(text: str, config: Optional[NormalizerConfig] = None) -> Optional[Dict[str, Any]]:
    """Convenience wrapper for StatementNormalizer.analyze."""
    return StatementNormalizer(config).analyze(text)
