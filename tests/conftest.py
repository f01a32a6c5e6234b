"""
Shared pytest fixtures for stmtnorm tests.

Provides sample statement texts, configs, and the fixtures directory.
"""

import pytest
import sys
from decimal import Decimal
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from stmtnorm.core.config import NormalizerConfig
from stmtnorm.core.models import Transaction


STANDARD_CSV = (
    "Date,Description,Amount,Category\n"
    "2024-01-15,Salary Deposit,3000.00,Salary\n"
    "2024-01-16,Grocery Store,-85.50,Groceries\n"
)

SEPARATE_COLUMNS_CSV = (
    "Trans. Date,Value Date,NARRATION,Debit,Credit\n"
    "2024-01-16,2024-01-16,POS PURCHASE,85.50,\n"
    "2024-01-17,2024-01-17,NEFT CREDIT ACME,,1200.00\n"
)

SECTIONAL_TEXT = (
    "Date: 06/01/2024\n"
    "Description: Uber Trip\n"
    "Amount: -25.00\n"
)

HEADERLESS_TEXT = (
    "01/15/2024   DEBIT CARD   STARBUCKS 1234   -4.50\n"
    "01/16/2024   DEPOSIT      PAYROLL ACME CORP   +2,500.00\n"
)


@pytest.fixture
def fixtures_path():
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def standard_csv():
    return STANDARD_CSV


@pytest.fixture
def separate_columns_csv():
    return SEPARATE_COLUMNS_CSV


@pytest.fixture
def sectional_text():
    return SECTIONAL_TEXT


@pytest.fixture
def headerless_text():
    return HEADERLESS_TEXT


@pytest.fixture
def day_first_config():
    """Config resolving ambiguous dates as DD/MM."""
    return NormalizerConfig(date_convention="day_first")


@pytest.fixture
def sample_transactions():
    """Transactions with explicit categories (round-trip safe)."""
    return [
        Transaction("2024-01-15", "Salary Deposit", Decimal("3000.00"), "Salary", "USD"),
        Transaction("2024-01-16", 'Tesco "Express", High St', Decimal("-85.50"), "Groceries", "GBP"),
        Transaction("2024-01-17", "Netflix", Decimal("-15.99"), "Subscriptions", "USD"),
        Transaction("2024-01-18", "Refund, partial", Decimal("12"), "Shopping, Online", "EUR"),
    ]
