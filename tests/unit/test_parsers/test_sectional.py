"""
Tests for sectional and structured "Key: value" strategies.
"""

import pytest
from decimal import Decimal

from stmtnorm.core.models import IssueKind, ParseResult
from stmtnorm.parsers.base import StatementDocument
from stmtnorm.parsers.sectional import (
    SectionalStrategy,
    StructuredStrategy,
    has_sectional_markers,
    parse_key_line,
)


def run(strategy, text):
    document = StatementDocument.from_text(text)
    result = ParseResult()
    return strategy.extract(document, result), result


class TestKeyLines:
    """Test key line helpers."""

    @pytest.mark.parametrize("line,expected", [
        ("Date: 06/01/2024", ("date", "06/01/2024")),
        ("  details :  Uber Trip ", ("details", "Uber Trip")),
        ("AMOUNT:-25.00", ("amount", "-25.00")),
        ("Category: Transport", ("category", "Transport")),
    ])
    def test_parse_key_line(self, line, expected):
        assert parse_key_line(line) == expected

    @pytest.mark.parametrize("line", ["Balance: 100", "Just text", "Date 06/01/2024"])
    def test_non_key_lines(self, line):
        assert parse_key_line(line) is None

    def test_markers(self, sectional_text):
        assert has_sectional_markers(sectional_text) is True
        assert has_sectional_markers("Date: 06/01/2024 only") is False


class TestSectionalStrategy:
    """Test block-per-transaction parsing."""

    def test_single_block(self, sectional_text):
        transactions, _ = run(SectionalStrategy(), sectional_text)

        assert len(transactions) == 1
        txn = transactions[0]
        assert txn.date == "2024-06-01"
        assert txn.description == "Uber Trip"
        assert txn.amount == Decimal("-25.00")
        assert txn.category == "Transport"
        assert txn.currency == "USD"

    def test_details_key_and_currency_line(self):
        text = (
            "Statement for account 1234\n"
            "Date: 15/03/2024\n"
            "Details: Cafe Nero\n"
            "Amount: -4.20\n"
            "Currency: GBP\n"
            "\n"
            "Date: 16/03/2024\n"
            "Details: Salary March\n"
            "Amount: 2,000.00 EUR\n"
        )
        transactions, _ = run(SectionalStrategy(), text)

        assert [t.date for t in transactions] == ["2024-03-15", "2024-03-16"]
        assert transactions[0].currency == "GBP"
        assert transactions[0].category == "Dining"
        assert transactions[1].currency == "EUR"
        assert transactions[1].amount == Decimal("2000.00")
        assert transactions[1].category == "Salary"

    def test_explicit_category(self):
        text = "Date: 2024-06-01\nDescription: Uber Trip\nAmount: -25\nCategory: Business Travel\n"
        transactions, _ = run(SectionalStrategy(), text)
        assert transactions[0].category == "Business Travel"

    def test_incomplete_block_skipped(self):
        text = "Date: 2024-06-01\nAmount: -25\nDate: 2024-06-02\nDescription: Bus\nAmount: -2\n"
        transactions, result = run(SectionalStrategy(), text)

        assert [t.description for t in transactions] == ["Bus"]
        assert result.skipped_rows == 1
        assert result.issues[0].line_number == 1

    def test_invalid_date_skipped(self):
        text = "Date: someday\nDescription: Bus\nAmount: -2\n"
        transactions, result = run(SectionalStrategy(), text)

        assert transactions == []
        assert result.issues[0].field == "date"


class TestStructuredStrategy:
    """Test streaming Date/Description/Amount parsing."""

    def test_stream_with_rules(self):
        text = (
            "Date: 2024-06-01\n"
            "Description: Netflix\n"
            "Amount: -15.99\n"
            "----------\n"
            "Date: 2024-06-02\n"
            "Description: Spotify\n"
            "Amount: -9.99\n"
        )
        transactions, _ = run(StructuredStrategy(), text)

        assert [(t.date, t.description, t.amount) for t in transactions] == [
            ("2024-06-01", "Netflix", Decimal("-15.99")),
            ("2024-06-02", "Spotify", Decimal("-9.99")),
        ]
        assert all(t.category == "Subscriptions" for t in transactions)

    def test_field_order_does_not_matter(self):
        text = "Amount: £12.00\nDescription: Tesco\nDate: 2024-06-01\n"
        transactions, _ = run(StructuredStrategy(), text)

        assert len(transactions) == 1
        assert transactions[0].currency == "GBP"

    def test_unparsable_date_degraded(self):
        text = "Date: someday\nDescription: Bus\nAmount: -2\n"
        transactions, result = run(StructuredStrategy(), text)

        assert transactions == []
        assert result.issues[0].kind is IssueKind.FIELD_DEGRADED
        assert result.issues[0].field == "date"

    def test_details_key_not_used(self, sectional_text):
        text = sectional_text.replace("Description:", "Details:")
        transactions, _ = run(StructuredStrategy(), text)
        assert transactions == []
