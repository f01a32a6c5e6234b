"""
Parsers for "Key: value" statement text.

Two flavours are common in PDF-extracted statements:

Sectional blocks (international bank exports), one block per transaction:
    Date: 06/01/2024
    Details: Uber Trip
    Amount: -25.00 EUR

Structured streams, where records are simply consecutive key lines,
optionally separated by "--" rules:
    Date: 2024-06-01
    Description: Netflix
    Amount: -15.99
    ----------
"""

import logging
import re
from typing import Dict, List, Optional, Tuple

from stmtnorm.core.models import ParseResult, Transaction
from stmtnorm.normalizers.amounts import detect_currency, normalize_amount
from stmtnorm.normalizers.dates import normalize_date
from stmtnorm.parsers.base import ParseStrategy, StatementDocument

logger = logging.getLogger(__name__)

KEY_LINE = re.compile(
    r"^(date|details|description|amount|currency|category)\s*:\s*(.*)$",
    re.IGNORECASE,
)

SECTIONAL_MARKERS = ("Date:", "Amount:")


def parse_key_line(line: str) -> Optional[Tuple[str, str]]:
    """Split "Key: value" into (lowercase key, stripped value)."""
    match = KEY_LINE.match(line.strip())
    if not match:
        return None
    return match.group(1).lower(), match.group(2).strip()


def has_sectional_markers(text: str) -> bool:
    return all(marker in text for marker in SECTIONAL_MARKERS)


class SectionalStrategy(ParseStrategy):
    """Parser for block-per-transaction "Key: value" statements."""

    NAME = "sectional"

    def applies_to(self, document: StatementDocument) -> bool:
        return has_sectional_markers(document.text)

    def extract(self, document: StatementDocument, result: ParseResult) -> List[Transaction]:
        transactions = []
        for start_line, fields in self._blocks(document):
            txn = self._parse_block(start_line, fields, result)
            if txn is not None:
                transactions.append(txn)
        return transactions

    def _blocks(self, document: StatementDocument):
        """Yield (line number, fields) for each block opened by a Date: line."""
        fields: Optional[Dict[str, str]] = None
        start_line = 0

        for line_number, line in document.non_blank_lines:
            parsed = parse_key_line(line)
            if parsed is None:
                continue
            key, value = parsed
            if key == "date":
                if fields is not None:
                    yield start_line, fields
                fields = {}
                start_line = line_number
            if fields is None:
                # Preamble before the first block
                continue
            if key == "details":
                key = "description"
            fields.setdefault(key, value)

        if fields is not None:
            yield start_line, fields

    def _parse_block(
        self,
        start_line: int,
        fields: Dict[str, str],
        result: ParseResult,
    ) -> Optional[Transaction]:
        if "description" not in fields or "amount" not in fields:
            self.skip_row(result, start_line, "incomplete block (needs Date, Description, Amount)")
            return None

        raw_amount = fields["amount"]
        currency = detect_currency(raw_amount, fields.get("currency"), self.config)

        return self.build_transaction(
            result,
            start_line,
            fields["date"],
            normalize_date(fields["date"], self.config),
            fields["description"],
            normalize_amount(raw_amount, self.config),
            currency,
            fields.get("category"),
        )


class StructuredStrategy(ParseStrategy):
    """
    Parser for streams of Date:/Description:/Amount: lines.

    Fields accumulate into a pending record that is emitted as soon as all
    three are present, then reset. Lines starting with "--" are ignored.
    """

    NAME = "structured"

    def applies_to(self, document: StatementDocument) -> bool:
        return has_sectional_markers(document.text)

    def extract(self, document: StatementDocument, result: ParseResult) -> List[Transaction]:
        transactions = []
        pending: Dict[str, object] = {}

        for line_number, line in document.non_blank_lines:
            if line.startswith("--"):
                continue

            parsed = parse_key_line(line)
            if parsed is None:
                continue
            key, value = parsed

            if key == "date":
                date = normalize_date(value, self.config)
                if date:
                    pending["date"] = date
                else:
                    self.degrade_field(result, line_number, f"unparsable date {value!r}", "date")
            elif key == "description":
                if value:
                    pending["description"] = value
            elif key == "amount":
                pending["amount"] = normalize_amount(value, self.config)
                pending["currency"] = detect_currency(value, config=self.config)
            else:
                continue

            if all(k in pending for k in ("date", "description", "amount")):
                txn = self.build_transaction(
                    result,
                    line_number,
                    str(pending["date"]),
                    str(pending["date"]),
                    str(pending["description"]),
                    pending["amount"],
                    str(pending["currency"]),
                )
                if txn is not None:
                    transactions.append(txn)
                pending = {}

        return transactions
