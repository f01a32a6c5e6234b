"""
Exporters for normalized transactions.

- csv_writer: canonical CSV (round-trips with the delimited parser)
- excel: pandas DataFrame / openpyxl workbook with a category summary
"""

from stmtnorm.exporters.csv_writer import CSV_HEADERS, format_amount, serialize, write_csv
from stmtnorm.exporters.excel import summarize_by_category, to_dataframe, write_excel

__all__ = [
    "CSV_HEADERS",
    "format_amount",
    "serialize",
    "write_csv",
    "summarize_by_category",
    "to_dataframe",
    "write_excel",
]
