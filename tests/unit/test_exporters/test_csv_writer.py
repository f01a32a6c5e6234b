"""
Tests for the canonical CSV serializer.
"""

from decimal import Decimal

from stmtnorm.core.models import Transaction
from stmtnorm.exporters.csv_writer import CSV_HEADERS, format_amount, quote, serialize, write_csv


class TestSerialize:
    """Test serialize() output format."""

    def test_header_only_for_empty_list(self):
        assert serialize([]) == "Date,Description,Amount,Category,Currency"

    def test_rows(self):
        transactions = [
            Transaction("2024-01-15", "Salary Deposit", Decimal("3000.00"), "Salary"),
            Transaction("2024-01-16", "Grocery Store", Decimal("-85.5"), "Groceries", "GBP"),
        ]

        assert serialize(transactions) == (
            "Date,Description,Amount,Category,Currency\n"
            '2024-01-15,"Salary Deposit",3000.00,Salary,USD\n'
            '2024-01-16,"Grocery Store",-85.5,Groceries,GBP'
        )

    def test_description_quotes_doubled(self):
        txn = Transaction("2024-01-15", 'Joe\'s "Best" Pizza', Decimal("-20"), "Dining")
        row = serialize([txn]).splitlines()[1]
        assert row == '2024-01-15,"Joe\'s ""Best"" Pizza",-20,Dining,USD'

    def test_category_with_comma_quoted(self):
        txn = Transaction("2024-01-15", "Refund", Decimal("5"), "Shopping, Online")
        row = serialize([txn]).splitlines()[1]
        assert row.endswith(',"Shopping, Online",USD')

    def test_no_trailing_newline(self, sample_transactions):
        assert not serialize(sample_transactions).endswith("\n")


class TestHelpers:
    """Test formatting helpers."""

    def test_format_amount_never_scientific(self):
        assert format_amount(Decimal("1E+3")) == "1000"
        assert format_amount(Decimal("-0.10")) == "-0.10"

    def test_quote(self):
        assert quote('a"b') == '"a""b"'

    def test_headers(self):
        assert CSV_HEADERS == ["Date", "Description", "Amount", "Category", "Currency"]


class TestWriteCsv:
    """Test writing CSV files."""

    def test_writes_file(self, tmp_path, sample_transactions):
        output = write_csv(sample_transactions, tmp_path / "out" / "normalized.csv")

        assert output.exists()
        content = output.read_text(encoding="utf-8")
        assert content == serialize(sample_transactions) + "\n"
