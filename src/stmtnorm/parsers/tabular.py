"""
Free-form tabular line parser.

Last-resort strategy for text pulled out of PDFs where columns have
collapsed into whitespace: any line with a date token followed somewhere by
an amount-shaped token is read as DATE ... DESCRIPTION ... AMOUNT, the
description being the text between the date and the last amount.
"""

import re
from functools import lru_cache
from typing import List, Optional, Tuple

from stmtnorm.core.config import MONTH_NAMES
from stmtnorm.core.models import ParseResult, Transaction
from stmtnorm.normalizers.amounts import config_amount_pattern, detect_currency, normalize_amount
from stmtnorm.normalizers.dates import normalize_date
from stmtnorm.parsers.base import ParseStrategy, StatementDocument, collapse_whitespace

_MONTHS = "|".join(sorted(MONTH_NAMES, key=len, reverse=True))

DATE_TOKEN = re.compile(
    r"(?<![\w/.\-])("
    r"\d{4}[/\-.]\d{1,2}[/\-.]\d{1,2}"
    r"|\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4}"
    rf"|\d{{1,2}}[\-\s](?i:{_MONTHS})\.?[\-\s]\d{{2,4}}"
    rf"|(?i:{_MONTHS})\.?\s+\d{{1,2}},?\s+\d{{4}}"
    r")(?![\w/])"
)

EDGE_PUNCTUATION = " \t,;|:-"


@lru_cache(maxsize=16)
def _amount_token(amount: str) -> "re.Pattern":
    return re.compile(rf"(?<![\w.])(?:{amount})(?![\w/])")


class TabularStrategy(ParseStrategy):
    """Parser for loosely aligned DATE DESCRIPTION AMOUNT text lines."""

    NAME = "tabular"

    def applies_to(self, document: StatementDocument) -> bool:
        # Rows under a recognized header belong to the delimited parser
        return not document.structure.is_valid

    def extract(self, document: StatementDocument, result: ParseResult) -> List[Transaction]:
        amount_re = _amount_token(config_amount_pattern(self.config))
        transactions = []

        for line_number, line in document.non_blank_lines:
            txn = self._parse_line(line, line_number, amount_re, result)
            if txn is not None:
                transactions.append(txn)

        return transactions

    def _parse_line(
        self,
        line: str,
        line_number: int,
        amount_re: "re.Pattern",
        result: ParseResult,
    ) -> Optional[Transaction]:
        date_matches = list(DATE_TOKEN.finditer(line))
        if not date_matches:
            return None

        first = date_matches[0]
        date_spans = [m.span() for m in date_matches]
        amount = self._last_amount(line, first.end(), date_spans, amount_re)
        if amount is None:
            return None

        raw_amount, amount_start = amount
        description = collapse_whitespace(line[first.end():amount_start].strip(EDGE_PUNCTUATION))
        if not description:
            return None

        raw_date = first.group(1)
        return self.build_transaction(
            result,
            line_number,
            raw_date,
            normalize_date(raw_date, self.config),
            description,
            normalize_amount(raw_amount, self.config),
            detect_currency(raw_amount, config=self.config),
        )

    @staticmethod
    def _last_amount(
        line: str,
        start: int,
        date_spans: List[Tuple[int, int]],
        amount_re: "re.Pattern",
    ) -> Optional[Tuple[str, int]]:
        """Last amount token after start that does not overlap a date token."""
        last = None
        for match in amount_re.finditer(line, start):
            begin, end = match.span()
            if any(begin < d_end and end > d_start for d_start, d_end in date_spans):
                continue
            last = (match.group(0), begin)
        return last
