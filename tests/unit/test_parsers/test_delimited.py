"""
Tests for the standard delimited strategy.
"""

import pytest
from decimal import Decimal

from stmtnorm.core.models import IssueKind, ParseResult
from stmtnorm.parsers.base import StatementDocument
from stmtnorm.parsers.delimited import DelimitedStrategy


def run(text, strategy=None):
    """Run the delimited strategy on text, returning (transactions, result)."""
    strategy = strategy or DelimitedStrategy()
    document = StatementDocument.from_text(text)
    result = ParseResult()
    return strategy.extract(document, result), result


class TestStatementDocument:
    """Test delimiter sniffing and header detection."""

    def test_comma(self, standard_csv):
        document = StatementDocument.from_text(standard_csv)
        assert document.delimiter == ","
        assert document.header_index == 0
        assert document.structure.is_valid is True

    def test_semicolon(self):
        document = StatementDocument.from_text("Date;Description;Amount\n2024-01-15;Coffee;-4,50\n")
        assert document.delimiter == ";"
        assert document.structure.is_valid is True

    def test_tab_and_pipe(self):
        assert StatementDocument.from_text("Date\tDescription\tAmount\n").delimiter == "\t"
        assert StatementDocument.from_text("Date|Description|Amount\n").delimiter == "|"

    def test_leading_blank_lines(self):
        document = StatementDocument.from_text("\n\nDate,Description,Amount\n2024-01-15,Coffee,-4\n")
        assert document.header_index == 2

    def test_not_delimited(self, sectional_text):
        document = StatementDocument.from_text(sectional_text)
        assert document.looks_delimited is False
        assert document.structure.is_valid is False


class TestDelimitedStrategy:
    """Test row parsing for both amount layouts."""

    def test_single_amount_column(self, standard_csv):
        transactions, result = run(standard_csv)

        assert len(transactions) == 2
        salary, grocery = transactions
        assert salary.date == "2024-01-15"
        assert salary.description == "Salary Deposit"
        assert salary.amount == Decimal("3000.00")
        assert salary.category == "Salary"
        assert salary.currency == "USD"
        assert grocery.amount == Decimal("-85.50")
        assert grocery.category == "Groceries"
        assert result.warnings == []

    def test_separate_debit_credit_columns(self, separate_columns_csv):
        transactions, _ = run(separate_columns_csv)

        assert len(transactions) == 2
        assert transactions[0].amount == Decimal("-85.50")
        assert transactions[0].category == "Miscellaneous"
        assert transactions[1].amount == Decimal("1200.00")

    def test_signed_debit_column_uses_magnitude(self):
        text = "Date,Description,Debit,Credit\n2024-01-16,Coffee,-4.50,\n"
        transactions, _ = run(text)
        assert transactions[0].amount == Decimal("-4.50")

    def test_category_inferred_when_column_absent(self):
        text = "Date,Description,Amount\n2024-01-16,Uber Trip,-25.00\n"
        transactions, _ = run(text)
        assert transactions[0].category == "Transport"

    def test_blank_category_cell_inferred(self):
        text = "Date,Description,Amount,Category\n2024-01-16,Netflix,-15.99,\n"
        transactions, _ = run(text)
        assert transactions[0].category == "Subscriptions"

    def test_operator_category_kept_verbatim(self):
        text = "Date,Description,Amount,Category\n2024-01-16,Uber Trip,-25.00,Business Travel\n"
        transactions, _ = run(text)
        assert transactions[0].category == "Business Travel"

    def test_currency_column(self):
        text = "Date,Description,Amount,Currency\n2024-01-16,Tea,-2.00,gbp\n"
        transactions, _ = run(text)
        assert transactions[0].currency == "GBP"

    def test_currency_from_symbol(self):
        text = 'Date,Description,Amount\n2024-01-16,Tea,"€2,00"\n2024-01-17,Chai,₹40\n'
        transactions, _ = run(text)
        assert transactions[0].currency == "EUR"
        assert transactions[1].currency == "INR"

    def test_quoted_description_with_comma(self):
        text = 'Date,Description,Amount\n2024-01-16,"Smith, John ""JJ""",-10\n'
        transactions, _ = run(text)
        assert transactions[0].description == 'Smith, John "JJ"'

    def test_inch_mark_keeps_following_rows(self):
        text = (
            "Date,Description,Amount\n"
            '2024-01-01,TV 55" screen,-400\n'
            "2024-01-02,Coffee,-4.50\n"
            "2024-01-03,Salary,3000\n"
            "2024-01-04,Rent,-1200\n"
        )
        transactions, result = run(text)

        assert [t.description for t in transactions] == ['TV 55" screen', "Coffee", "Salary", "Rent"]
        assert transactions[0].amount == Decimal("-400")
        assert result.warnings == []

    def test_carriage_return_inside_quotes_preserved(self):
        text = 'Date,Description,Amount\n2024-01-16,"line\rbreak",-10\n'
        transactions, _ = run(text)
        assert transactions[0].description == "line\rbreak"

    def test_semicolon_delimited(self):
        text = "Date;Description;Amount\n15/01/2024;Coffee;-4.50\n"
        transactions, _ = run(text)
        assert transactions[0].date == "2024-01-15"
        assert transactions[0].amount == Decimal("-4.50")


class TestDelimitedSoftFailures:
    """Test RowSkipped and FieldDegraded handling."""

    def test_short_row_skipped(self):
        text = "Date,Description,Amount\n2024-01-15,Coffee\n2024-01-16,Tea,-2\n"
        transactions, result = run(text)

        assert len(transactions) == 1
        assert result.skipped_rows == 1
        assert "insufficient columns" in result.warnings[0]
        assert result.issues[0].line_number == 2

    def test_invalid_date_skipped(self):
        text = "Date,Description,Amount\nyesterday,Coffee,-4\n2024-01-16,Tea,-2\n"
        transactions, result = run(text)

        assert [t.description for t in transactions] == ["Tea"]
        assert result.issues[0].kind is IssueKind.ROW_SKIPPED
        assert result.issues[0].field == "date"

    def test_empty_description_skipped(self):
        text = "Date,Description,Amount\n2024-01-15,,-4\n"
        transactions, result = run(text)

        assert transactions == []
        assert result.issues[0].field == "description"

    def test_non_numeric_amount_degrades_to_zero(self):
        text = "Date,Description,Amount\n2024-01-15,Coffee,N/A\n"
        transactions, result = run(text)

        assert transactions[0].amount == Decimal("0")
        assert result.issues[0].kind is IssueKind.FIELD_DEGRADED
        assert result.issues[0].field == "amount"
        assert result.warnings == []

    @pytest.mark.parametrize("text", [
        "Date,Description,Amount\n",
        "Date,Description,Amount\n\n\n",
    ])
    def test_header_only(self, text):
        transactions, result = run(text)
        assert transactions == []
        assert result.issues == []
