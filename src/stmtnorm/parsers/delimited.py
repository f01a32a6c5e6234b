"""
Standard delimited (CSV-like) statement parser.

Requires a header row that the structure detector accepts. Supports both
layouts seen in bank exports:
- single signed amount column
- separate debit and credit columns (amount = credit - debit)
"""

import logging
import re
from decimal import Decimal
from typing import List, Optional, Sequence

from stmtnorm.core.models import HeaderStructure, ParseResult, Transaction
from stmtnorm.normalizers.amounts import detect_currency, normalize_amount
from stmtnorm.normalizers.dates import normalize_date
from stmtnorm.parsers.base import ParseStrategy, StatementDocument
from stmtnorm.parsers.fields import iter_records

logger = logging.getLogger(__name__)

HAS_DIGIT = re.compile(r"\d")


def _cell(values: Sequence[str], index: Optional[int]) -> str:
    if index is None or index >= len(values):
        return ""
    return values[index]


class DelimitedStrategy(ParseStrategy):
    """Parser for delimited statements with a recognizable header row."""

    NAME = "delimited"

    def applies_to(self, document: StatementDocument) -> bool:
        return document.structure.is_valid

    def extract(self, document: StatementDocument, result: ParseResult) -> List[Transaction]:
        """Parse every data row below the header."""
        structure = document.structure
        transactions = []

        logger.debug(
            f"Detected structure: {structure.field_map()} "
            f"(delimiter={document.delimiter!r}, headers={list(document.headers)})"
        )

        data_lines = document.lines[document.header_index + 1:]
        records = iter_records(
            data_lines,
            delimiter=document.delimiter,
            start_line=document.header_index + 2,
        )

        for line_number, values in records:
            txn = self._parse_row(structure, values, line_number, result)
            if txn is not None:
                transactions.append(txn)

        logger.info(f"Parsed {len(transactions)} transactions from delimited rows")
        return transactions

    def _parse_row(
        self,
        structure: HeaderStructure,
        values: List[str],
        line_number: int,
        result: ParseResult,
    ) -> Optional[Transaction]:
        """Parse a single data row."""
        max_index = max(structure.required_indices)
        if len(values) <= max_index:
            self.skip_row(
                result,
                line_number,
                f"insufficient columns ({len(values)} found, {max_index + 1} needed)",
            )
            return None

        raw_date = _cell(values, structure.date)
        date = normalize_date(raw_date, self.config)
        description = _cell(values, structure.description)

        if structure.has_separate_columns:
            debit_raw = _cell(values, structure.debit)
            credit_raw = _cell(values, structure.credit)
            debit = abs(self._amount(debit_raw, "debit", line_number, result))
            credit = abs(self._amount(credit_raw, "credit", line_number, result))
            amount = credit - debit
            amount_text = debit_raw + credit_raw
        else:
            amount_text = _cell(values, structure.amount)
            amount = self._amount(amount_text, "amount", line_number, result)

        currency = detect_currency(
            amount_text,
            currency_column=_cell(values, structure.currency),
            config=self.config,
        )
        category = _cell(values, structure.category)

        return self.build_transaction(
            result,
            line_number,
            raw_date,
            date,
            description,
            amount,
            currency,
            category,
        )

    def _amount(self, raw: str, field: str, line_number: int, result: ParseResult) -> Decimal:
        value = normalize_amount(raw, self.config)
        if raw.strip() and not HAS_DIGIT.search(raw):
            self.degrade_field(result, line_number, f"non-numeric {field} {raw!r}, using 0", field)
        return value
