"""
Parser for header-less fixed-shape statement lines (U.S. bank PDF style).

Each transaction is one line shaped as DATE  TYPE  DESCRIPTION  AMOUNT:
    01/15/2024   DEBIT CARD   STARBUCKS #1234   -4.50
    01/16/2024   DEPOSIT      PAYROLL ACME CORP  +2,500.00
"""

import re
from functools import lru_cache
from typing import List, Optional

from stmtnorm.core.config import NormalizerConfig
from stmtnorm.core.models import ParseResult, Transaction
from stmtnorm.normalizers.amounts import config_amount_pattern, detect_currency, normalize_amount
from stmtnorm.normalizers.dates import normalize_date
from stmtnorm.parsers.base import ParseStrategy, StatementDocument, collapse_whitespace


@lru_cache(maxsize=16)
def _line_pattern(amount: str) -> "re.Pattern":
    return re.compile(
        r"^(?P<date>\d{2}/\d{2}/\d{4})\s+"
        r"(?P<type>[A-Z][A-Z\s]*?)\s+"
        r"(?P<description>.+?)\s+"
        rf"(?P<amount>{amount})$"
    )


def headerless_pattern(config: Optional[NormalizerConfig] = None) -> "re.Pattern":
    """Compiled DATE TYPE DESCRIPTION AMOUNT line pattern."""
    return _line_pattern(config_amount_pattern(config))


class HeaderlessStrategy(ParseStrategy):
    """Parser for DATE TYPE DESCRIPTION AMOUNT lines."""

    NAME = "headerless"

    def applies_to(self, document: StatementDocument) -> bool:
        pattern = headerless_pattern(self.config)
        return any(pattern.match(line) for _, line in document.non_blank_lines)

    def extract(self, document: StatementDocument, result: ParseResult) -> List[Transaction]:
        pattern = headerless_pattern(self.config)
        transactions = []

        for line_number, line in document.non_blank_lines:
            match = pattern.match(line)
            if not match:
                continue

            raw_amount = match.group("amount")
            description = collapse_whitespace(f"{match.group('type')} {match.group('description')}")

            txn = self.build_transaction(
                result,
                line_number,
                match.group("date"),
                normalize_date(match.group("date"), self.config),
                description,
                normalize_amount(raw_amount, self.config),
                detect_currency(raw_amount, config=self.config),
            )
            if txn is not None:
                transactions.append(txn)

        return transactions
