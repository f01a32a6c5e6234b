"""
Tests for the strategy dispatcher and deduplication.
"""

import pytest
from decimal import Decimal

from stmtnorm.core.exceptions import EmptyInputError, FormatUnrecognizedError
from stmtnorm.core.models import ParseResult, Transaction
from stmtnorm.parsers.delimited import DelimitedStrategy
from stmtnorm.parsers.dispatcher import (
    StatementNormalizer,
    analyze_structure,
    parse,
    validate_format,
)
from stmtnorm.parsers.utils import consolidate_transactions, deduplicate


class TestDeduplicate:
    """Test (date, description, amount) deduplication."""

    def test_keeps_first_seen(self):
        first = Transaction("2024-01-15", "Coffee", Decimal("-4.50"), "Dining")
        again = Transaction("2024-01-15", "Coffee", Decimal("-4.5"), "Miscellaneous", "GBP")
        other = Transaction("2024-01-16", "Coffee", Decimal("-4.50"), "Dining")

        unique = deduplicate([first, again, other])

        assert unique == [first, other]
        assert unique[0].category == "Dining"

    def test_empty(self):
        assert deduplicate([]) == []

    def test_consolidate_sorts_and_skips_failures(self):
        late = Transaction("2024-02-01", "Rent", Decimal("-1200"), "Rent")
        early = Transaction("2024-01-01", "Rent", Decimal("-1200"), "Rent")
        results = [
            ParseResult(transactions=[late, early]),
            ParseResult(transactions=[early]),
            ParseResult(error=FormatUnrecognizedError()),
        ]

        assert consolidate_transactions(results) == [early, late]
        assert consolidate_transactions(results, sort=False) == [late, early]


class TestStatementNormalizerParse:
    """Test parse() strategy composition."""

    @pytest.fixture
    def normalizer(self):
        return StatementNormalizer()

    def test_standard_csv(self, normalizer, standard_csv):
        result = normalizer.parse(standard_csv)

        assert result.success is True
        assert result.transaction_count == 2
        assert result.strategies == {"delimited": 2}

    def test_sectional_dedup_across_strategies(self, normalizer, sectional_text):
        """Sectional and structured both derive the same record."""
        result = normalizer.parse(sectional_text)

        assert result.strategies["sectional"] == 1
        assert result.strategies["structured"] == 1
        assert len(result.transactions) == 1
        assert result.transactions[0].key == ("2024-06-01", "Uber Trip", Decimal("-25.00"))

    def test_headerless_dedup_with_tabular(self, normalizer, headerless_text):
        result = normalizer.parse(headerless_text)

        assert result.strategies["headerless"] == 2
        assert result.strategies["tabular"] == 2
        assert result.transaction_count == 2

    def test_unrecognized_header(self, normalizer):
        result = normalizer.parse("Foo,Bar,Baz\n1,2,3\n")

        assert result.success is False
        assert result.transactions == []
        assert isinstance(result.error, FormatUnrecognizedError)
        assert result.error.headers == ["Foo", "Bar", "Baz"]

    def test_valid_header_without_rows(self, normalizer):
        result = normalizer.parse("Date,Description,Amount\nnot-a-date,Coffee,-4\n")

        assert result.success is False
        assert "below the header" in result.error.message
        assert result.skipped_rows == 1

    def test_free_text_without_transactions(self, normalizer):
        result = normalizer.parse("Hello there\nNothing to see\n")

        assert result.success is False
        assert result.error.code == "FORMAT_UNRECOGNIZED"

    @pytest.mark.parametrize("text", [None, "", "   \n\t", 42])
    def test_empty_input_raises(self, normalizer, text):
        with pytest.raises(EmptyInputError):
            normalizer.parse(text)

    def test_custom_strategy_list(self, sectional_text):
        normalizer = StatementNormalizer(strategies=[DelimitedStrategy])
        result = normalizer.parse(sectional_text)
        assert result.success is False
        assert result.strategies == {}

    def test_day_first_config(self, day_first_config):
        text = "Date,Description,Amount\n03/04/2024,Coffee,-4\n"
        result = StatementNormalizer(day_first_config).parse(text)
        assert result.transactions[0].date == "2024-04-03"

    def test_module_parse_unpacks(self, standard_csv):
        transactions, error = parse(standard_csv)
        assert error is None
        assert len(transactions) == 2


class TestValidateFormat:
    """Test the format acceptance check."""

    def test_valid_csv(self, standard_csv):
        assert validate_format(standard_csv) is True

    def test_sectional(self, sectional_text):
        assert validate_format(sectional_text) is True

    def test_headerless(self, headerless_text):
        assert validate_format(headerless_text) is True

    def test_tabular_text_with_transactions(self):
        text = "Statement\n15-Jan-2024  Coffee shop  -3.20\n"
        assert validate_format(text) is True

    def test_invalid_header(self):
        assert validate_format("Foo,Bar\n1,2\n") is False

    @pytest.mark.parametrize("text", ["", None, "Date,Description,Amount"])
    def test_too_short(self, text):
        assert validate_format(text) is False


class TestAnalyzeStructure:
    """Test the debugging analysis."""

    def test_standard_csv(self, standard_csv):
        analysis = analyze_structure(standard_csv)

        assert analysis["format"] == "Standard CSV"
        assert analysis["delimiter"] == ","
        assert analysis["headers"] == ["Date", "Description", "Amount", "Category"]
        assert analysis["detected_structure"]["amount"] == 2
        assert analysis["sample_row"] == "2024-01-15,Salary Deposit,3000.00,Salary"
        assert analysis["format_detection"]["is_standard_csv"] is True
        assert analysis["transaction_count"] == 2

    def test_sectional(self, sectional_text):
        analysis = analyze_structure(sectional_text)

        assert analysis["format"] == "Sectional"
        assert analysis["format_detection"]["is_sectional"] is True
        assert analysis["sample_lines"][0] == "Date: 06/01/2024"

    def test_headerless(self, headerless_text):
        assert analyze_structure(headerless_text)["format"] == "Headerless"

    def test_unknown(self):
        analysis = analyze_structure("Foo,Bar\n1,2\n")
        assert analysis["format"] == "Unknown"
        assert analysis["transaction_count"] == 0

    def test_blank(self):
        assert analyze_structure("  ") is None
