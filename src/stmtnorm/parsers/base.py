"""
Base class for statement parse strategies.

Each strategy recognises one statement shape and turns the lines it
understands into candidate Transactions. Strategies never raise for bad
data: rows they cannot use are recorded on the ParseResult as soft issues.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Tuple

from stmtnorm.core.config import DEFAULT_CONFIG, NormalizerConfig
from stmtnorm.core.exceptions import ValidationError
from stmtnorm.core.models import HeaderStructure, IssueKind, ParseIssue, ParseResult, Transaction
from stmtnorm.normalizers.categories import classify
from stmtnorm.parsers.fields import CANDIDATE_DELIMITERS, split_fields
from stmtnorm.parsers.headers import detect_header_structure

logger = logging.getLogger(__name__)

WHITESPACE_RUN = re.compile(r"\s+")


@dataclass(frozen=True)
class StatementDocument:
    """Read-only view of one input text, shared by all strategies of a parse call."""

    text: str
    lines: Tuple[str, ...]
    header_index: Optional[int]
    delimiter: str
    structure: HeaderStructure

    @classmethod
    def from_text(cls, text: str, config: Optional[NormalizerConfig] = None) -> "StatementDocument":
        """
        Split text into lines and detect the header structure once.

        The delimiter is sniffed from the first non-blank line: the first
        candidate (comma, semicolon, tab, pipe) that yields a valid header
        structure wins, else the first candidate that splits the line at all.
        """
        config = config or DEFAULT_CONFIG
        lines = tuple(line.rstrip("\r") for line in text.split("\n"))

        header_index = next((i for i, line in enumerate(lines) if line.strip()), None)
        if header_index is None:
            return cls(text, lines, None, ",", HeaderStructure())

        header_line = lines[header_index]
        fallback = None
        for delimiter in CANDIDATE_DELIMITERS:
            if delimiter not in header_line:
                continue
            structure = detect_header_structure(split_fields(header_line, delimiter), config)
            if structure.is_valid:
                return cls(text, lines, header_index, delimiter, structure)
            if fallback is None:
                fallback = (delimiter, structure)

        if fallback is not None:
            return cls(text, lines, header_index, fallback[0], fallback[1])

        structure = detect_header_structure([header_line.strip()], config)
        return cls(text, lines, header_index, ",", structure)

    @property
    def header_line(self) -> Optional[str]:
        if self.header_index is None:
            return None
        return self.lines[self.header_index]

    @property
    def headers(self) -> Tuple[str, ...]:
        return self.structure.headers

    @property
    def looks_delimited(self) -> bool:
        """First line splits into several fields on the sniffed delimiter."""
        return self.header_line is not None and self.delimiter in self.header_line

    @property
    def non_blank_lines(self) -> List[Tuple[int, str]]:
        """(1-based line number, stripped line) for every non-blank line."""
        return [(i + 1, line.strip()) for i, line in enumerate(self.lines) if line.strip()]


class ParseStrategy(ABC):
    """Abstract base class for statement parse strategies."""

    NAME: str = ""  # Override in subclass

    def __init__(self, config: Optional[NormalizerConfig] = None):
        """
        Initialize strategy.

        Args:
            config: Normalizer config (lookup tables, date convention)
        """
        self.config = config or DEFAULT_CONFIG

    def applies_to(self, document: StatementDocument) -> bool:
        """Check whether this strategy should run on the document."""
        return True

    @abstractmethod
    def extract(self, document: StatementDocument, result: ParseResult) -> List[Transaction]:
        """
        Extract candidate transactions. Override in subclass.

        Args:
            document: The statement being parsed
            result: ParseResult collecting soft issues

        Returns:
            Candidate transactions in document order
        """
        pass

    def classify(self, description: str) -> str:
        return classify(description, self.config.category_rules)

    def skip_row(
        self,
        result: ParseResult,
        line_number: Optional[int],
        message: str,
        field: Optional[str] = None,
    ) -> None:
        """Record a skipped row; the batch continues."""
        issue = ParseIssue(IssueKind.ROW_SKIPPED, self.NAME, message, line_number, field)
        logger.warning(f"Skipping row: {issue}")
        result.add_issue(issue)

    def degrade_field(
        self,
        result: ParseResult,
        line_number: Optional[int],
        message: str,
        field: str,
    ) -> None:
        """Record a field that fell back to its default value."""
        issue = ParseIssue(IssueKind.FIELD_DEGRADED, self.NAME, message, line_number, field)
        logger.debug(f"Degraded field: {issue}")
        result.add_issue(issue)

    def build_transaction(
        self,
        result: ParseResult,
        line_number: Optional[int],
        raw_date: Optional[str],
        date: Optional[str],
        description: Optional[str],
        amount: Decimal,
        currency: str,
        category: Optional[str] = None,
    ) -> Optional[Transaction]:
        """
        Build a Transaction, or record the row as skipped.

        Missing date or description drops the row; a missing category is
        inferred from the description.
        """
        if not date:
            self.skip_row(result, line_number, f"invalid date {raw_date!r}", field="date")
            return None

        description = (description or "").strip()
        if not description:
            self.skip_row(result, line_number, "empty description", field="description")
            return None

        category = (category or "").strip() or self.classify(description)

        try:
            return Transaction(
                date=date,
                description=description,
                amount=amount,
                category=category,
                currency=currency or self.config.default_currency,
            )
        except ValidationError as e:
            self.skip_row(result, line_number, e.message, field=e.field)
            return None


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return WHITESPACE_RUN.sub(" ", text or "").strip()
