"""
Canonical CSV serializer.

Inverse of the delimited parser: parse(serialize(transactions)) reproduces
the transactions (categories included, since they are written out).
"""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Iterable, List, Union

from stmtnorm.core.models import Transaction

logger = logging.getLogger(__name__)

CSV_HEADERS = ["Date", "Description", "Amount", "Category", "Currency"]

_NEEDS_QUOTING = (",", '"', "\n", "\r")


def quote(value: str) -> str:
    """Wrap a field in double quotes, doubling any inner quotes."""
    return '"' + value.replace('"', '""') + '"'


def format_amount(amount: Decimal) -> str:
    """Plain positional notation, never scientific ("1E+3")."""
    return format(Decimal(amount), "f")


def _category_field(category: str) -> str:
    if any(ch in category for ch in _NEEDS_QUOTING):
        return quote(category)
    return category


def serialize_row(txn: Transaction) -> str:
    return ",".join([
        txn.date,
        quote(txn.description),
        format_amount(txn.amount),
        _category_field(txn.category),
        txn.currency or "USD",
    ])


def serialize(transactions: Iterable[Transaction]) -> str:
    """
    Render transactions as canonical CSV text.

    Column order is Date,Description,Amount,Category,Currency. The
    description is always quoted; rows are joined with "\\n" and there is
    no trailing newline.

    Args:
        transactions: Transactions to render

    Returns:
        CSV text including the header row
    """
    rows: List[str] = [",".join(CSV_HEADERS)]
    rows.extend(serialize_row(txn) for txn in transactions)
    return "\n".join(rows)


def write_csv(transactions: Iterable[Transaction], output_path: Union[str, Path]) -> Path:
    """
    Serialize transactions to a CSV file.

    Args:
        transactions: Transactions to write
        output_path: Destination file

    Returns:
        Path to the written file
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    text = serialize(transactions)
    path.write_text(text + "\n", encoding="utf-8")
    logger.info(f"Wrote {text.count(chr(10))} transactions to {path}")
    return path
