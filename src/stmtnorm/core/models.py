"""
Transaction and parse result data models.

Dataclasses for representing normalized statement data.
"""

import math
import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Tuple

from stmtnorm.core.exceptions import FormatUnrecognizedError, ValidationError

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class Transaction:
    """Canonical normalized record of one financial movement."""

    date: str
    description: str
    amount: Decimal
    category: str
    currency: str = "USD"

    def __post_init__(self):
        """Coerce the amount to Decimal and enforce record invariants."""
        if not isinstance(self.amount, Decimal):
            if isinstance(self.amount, float) and not math.isfinite(self.amount):
                raise ValidationError("Amount must be finite", field="amount")
            object.__setattr__(self, "amount", Decimal(str(self.amount)))
        if not self.amount.is_finite():
            raise ValidationError("Amount must be finite", field="amount")

        if not isinstance(self.date, str) or not ISO_DATE_PATTERN.match(self.date):
            raise ValidationError(f"Date must be YYYY-MM-DD, got {self.date!r}", field="date")
        try:
            date.fromisoformat(self.date)
        except ValueError:
            raise ValidationError(f"Not a calendar date: {self.date}", field="date")

        if not isinstance(self.description, str) or not self.description.strip():
            raise ValidationError("Description must not be empty", field="description")
        if not isinstance(self.category, str) or not self.category.strip():
            raise ValidationError("Category must not be empty", field="category")
        object.__setattr__(self, "description", self.description.strip())
        object.__setattr__(self, "category", self.category.strip())

        object.__setattr__(self, "currency", (self.currency or "USD").strip().upper())

    @property
    def key(self) -> Tuple[str, str, Decimal]:
        """Identity triple used for deduplication."""
        return (self.date, self.description, self.amount)

    @property
    def is_credit(self) -> bool:
        """Check if transaction is an inflow."""
        return self.amount > 0

    @property
    def is_debit(self) -> bool:
        """Check if transaction is an outflow."""
        return self.amount < 0

    @property
    def as_date(self) -> date:
        return date.fromisoformat(self.date)

    def to_dict(self) -> Dict[str, object]:
        """Convert to a JSON-friendly dict (amount as string)."""
        return {
            "date": self.date,
            "description": self.description,
            "amount": str(self.amount),
            "category": self.category,
            "currency": self.currency,
        }


@dataclass(frozen=True)
class HeaderStructure:
    """
    Column layout detected from a header row.

    Each field holds a zero-based column index, or None when not found.
    """

    headers: Tuple[str, ...] = ()
    date: Optional[int] = None
    description: Optional[int] = None
    debit: Optional[int] = None
    credit: Optional[int] = None
    amount: Optional[int] = None
    category: Optional[int] = None
    balance: Optional[int] = None
    reference: Optional[int] = None
    time: Optional[int] = None
    currency: Optional[int] = None
    status: Optional[int] = None

    @property
    def has_separate_columns(self) -> bool:
        """Distinct debit and credit columns were both found."""
        return (
            self.debit is not None
            and self.credit is not None
            and self.debit != self.credit
        )

    @property
    def has_single_amount(self) -> bool:
        return self.amount is not None

    @property
    def has_balance(self) -> bool:
        return self.balance is not None

    @property
    def is_valid(self) -> bool:
        """Date and description resolved plus at least one amount representation."""
        return (
            self.date is not None
            and self.description is not None
            and (self.has_separate_columns or self.has_single_amount)
        )

    @property
    def required_indices(self) -> List[int]:
        """Column indices a data row must reach to be parsable."""
        indices = [self.date, self.description]
        if self.has_separate_columns:
            indices.extend([self.debit, self.credit])
        else:
            indices.append(self.amount)
        return [i for i in indices if i is not None]

    def field_map(self) -> Dict[str, Optional[int]]:
        """Get the semantic field -> column index mapping."""
        return {
            "date": self.date,
            "description": self.description,
            "debit": self.debit,
            "credit": self.credit,
            "amount": self.amount,
            "category": self.category,
            "balance": self.balance,
            "reference": self.reference,
            "time": self.time,
            "currency": self.currency,
            "status": self.status,
        }

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = dict(self.field_map())
        data.update({
            "has_separate_columns": self.has_separate_columns,
            "has_single_amount": self.has_single_amount,
            "has_balance": self.has_balance,
            "is_valid": self.is_valid,
        })
        return data


class IssueKind(Enum):
    """Soft, recoverable parse problems."""

    ROW_SKIPPED = "row_skipped"          # Row dropped, batch continues
    FIELD_DEGRADED = "field_degraded"    # Field replaced by its default


@dataclass(frozen=True)
class ParseIssue:
    """A single soft failure observed while parsing."""

    kind: IssueKind
    strategy: str
    message: str
    line_number: Optional[int] = None
    field: Optional[str] = None

    def __str__(self) -> str:
        where = f"line {self.line_number}: " if self.line_number is not None else ""
        return f"[{self.strategy}] {where}{self.message}"


@dataclass
class ParseResult:
    """Result of parsing a statement."""

    transactions: List[Transaction] = field(default_factory=list)
    error: Optional[FormatUnrecognizedError] = None
    warnings: List[str] = field(default_factory=list)
    issues: List[ParseIssue] = field(default_factory=list)
    strategies: Dict[str, int] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.error is None

    def add_warning(self, warning: str) -> None:
        """Add a warning message."""
        self.warnings.append(warning)

    def add_issue(self, issue: ParseIssue) -> None:
        """Record a soft failure; skipped rows also become warnings."""
        self.issues.append(issue)
        if issue.kind is IssueKind.ROW_SKIPPED:
            self.add_warning(str(issue))

    def raise_for_error(self) -> "ParseResult":
        """Raise the FormatUnrecognizedError if parsing failed."""
        if self.error is not None:
            raise self.error
        return self

    @property
    def skipped_rows(self) -> int:
        return sum(1 for issue in self.issues if issue.kind is IssueKind.ROW_SKIPPED)

    @property
    def transaction_count(self) -> int:
        """Get number of transactions parsed."""
        return len(self.transactions)

    @property
    def total_inflow(self) -> Decimal:
        """Sum of positive amounts."""
        return sum((t.amount for t in self.transactions if t.amount > 0), Decimal("0"))

    @property
    def total_outflow(self) -> Decimal:
        """Sum of negative amounts (as a negative number)."""
        return sum((t.amount for t in self.transactions if t.amount < 0), Decimal("0"))

    @property
    def net_amount(self) -> Decimal:
        return self.total_inflow + self.total_outflow

    def __iter__(self):
        """Unpack as (transactions, error)."""
        return iter((self.transactions, self.error))
