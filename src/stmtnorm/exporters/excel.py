"""
Excel export for normalized transactions.

Generates a workbook with:
- Transactions sheet (one row per transaction, signed amounts coloured)
- Category_Summary sheet (inflow, outflow, net and count per category)
- Auto-filters and frozen header rows
"""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Iterable, List, Union

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.utils.dataframe import dataframe_to_rows

from stmtnorm.core.models import Transaction
from stmtnorm.exporters.csv_writer import CSV_HEADERS

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ["Category", "Inflow", "Outflow", "Net", "Count"]
AMOUNT_FORMAT = "#,##0.00"


def to_dataframe(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """
    Convert transactions to a DataFrame.

    Columns follow the CSV layout; Amount is a float column for analysis.
    """
    rows = [
        {
            "Date": txn.date,
            "Description": txn.description,
            "Amount": float(txn.amount),
            "Category": txn.category,
            "Currency": txn.currency,
        }
        for txn in transactions
    ]
    return pd.DataFrame(rows, columns=CSV_HEADERS)


def summarize_by_category(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """
    Per-category totals.

    Returns:
        DataFrame with Category, Inflow, Outflow (negative), Net and Count,
        sorted by category name
    """
    df = to_dataframe(transactions)
    if df.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    df["Inflow"] = df["Amount"].where(df["Amount"] > 0, 0.0)
    df["Outflow"] = df["Amount"].where(df["Amount"] < 0, 0.0)

    summary = df.groupby("Category").agg(
        Inflow=("Inflow", "sum"),
        Outflow=("Outflow", "sum"),
        Net=("Amount", "sum"),
        Count=("Amount", "size"),
    ).reset_index()

    for column in ("Inflow", "Outflow", "Net"):
        summary[column] = summary[column].round(2)

    return summary.sort_values("Category").reset_index(drop=True)[SUMMARY_COLUMNS]


def write_excel(transactions: Iterable[Transaction], output_path: Union[str, Path]) -> Path:
    """
    Write transactions and a category summary to an .xlsx workbook.

    Args:
        transactions: Transactions to export
        output_path: Destination .xlsx path

    Returns:
        Path to generated file
    """
    transactions = list(transactions)
    path = Path(output_path)

    wb = Workbook()
    wb.remove(wb.active)

    _write_sheet(wb, "Transactions", to_dataframe(transactions), amount_columns=["Amount"])
    _write_sheet(
        wb,
        "Category_Summary",
        summarize_by_category(transactions),
        amount_columns=["Inflow", "Outflow", "Net"],
    )

    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    logger.info(f"Wrote {len(transactions)} transactions to {path}")
    return path


def _write_sheet(wb: Workbook, title: str, df: pd.DataFrame, amount_columns: List[str]) -> None:
    ws = wb.create_sheet(title)

    for row in dataframe_to_rows(df, index=False, header=True):
        ws.append(row)

    _style_headers(ws, len(df.columns))

    amount_indices = [df.columns.get_loc(c) + 1 for c in amount_columns if c in df.columns]
    for row_idx in range(2, len(df) + 2):
        for col_idx in amount_indices:
            cell = ws.cell(row=row_idx, column=col_idx)
            cell.number_format = AMOUNT_FORMAT
            if isinstance(cell.value, (int, float, Decimal)):
                if cell.value > 0:
                    cell.font = Font(color="006600")  # Green for inflow
                elif cell.value < 0:
                    cell.font = Font(color="CC0000")  # Red for outflow

    last_column = get_column_letter(max(1, len(df.columns)))
    ws.auto_filter.ref = f"A1:{last_column}{max(2, len(df) + 1)}"
    ws.freeze_panes = "A2"
    _adjust_column_widths(ws)


def _style_headers(ws, column_count: int) -> None:
    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF")
    for col_idx in range(1, column_count + 1):
        cell = ws.cell(row=1, column=col_idx)
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center", vertical="center")


def _adjust_column_widths(ws) -> None:
    """Adjust column widths based on content."""
    for column_cells in ws.columns:
        max_length = max((len(str(c.value)) for c in column_cells if c.value is not None), default=0)
        column = column_cells[0].column_letter
        ws.column_dimensions[column].width = max(min(max_length + 2, 50), 10)
