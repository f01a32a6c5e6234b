"""
Statement file readers.

Turn a file on disk into the raw text the normalizer consumes:
- .csv / .tsv / .txt: read as UTF-8 (a BOM is dropped)
- .pdf: page texts extracted with pdfplumber, joined with newlines
- .xlsx / .xls: first sheet rendered to CSV text with pandas

Usage:
    from stmtnorm.readers import read_statement_text
    from stmtnorm import parse

    result = parse(read_statement_text("statement.pdf"))
"""

import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd
import pdfplumber

from stmtnorm.core.exceptions import StatementReadError

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = {".csv", ".tsv", ".txt"}
PDF_EXTENSIONS = {".pdf"}
EXCEL_EXTENSIONS = {".xlsx", ".xls"}

SUPPORTED_EXTENSIONS = TEXT_EXTENSIONS | PDF_EXTENSIONS | EXCEL_EXTENSIONS


def read_statement_text(file_path: Union[str, Path], password: Optional[str] = None) -> str:
    """
    Read a statement file into raw text.

    Args:
        file_path: Path to the statement
        password: Password for encrypted PDFs

    Returns:
        Raw statement text

    Raises:
        StatementReadError: If the file is missing, unsupported or unreadable
    """
    path = Path(file_path)
    if not path.exists():
        raise StatementReadError(str(path), "file not found")

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise StatementReadError(str(path), f"unsupported file type '{suffix or path.name}'")

    logger.debug(f"Reading statement {path.name}")

    if suffix in PDF_EXTENSIONS:
        return _read_pdf(path, password)
    if suffix in EXCEL_EXTENSIONS:
        return _read_excel(path)
    return _read_text(path)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise StatementReadError(str(path), str(e)) from e


def _read_pdf(path: Path, password: Optional[str] = None) -> str:
    """Extract text from all pages; pages without text are skipped."""
    text_parts = []
    try:
        with pdfplumber.open(str(path), password=password or "") as pdf:
            for page in pdf.pages:
                page_text = page.extract_text()
                if page_text:
                    text_parts.append(page_text)
    except Exception as e:
        if "password" in str(e).lower() or "encrypted" in str(e).lower():
            raise StatementReadError(str(path), "PDF password incorrect or missing") from e
        raise StatementReadError(str(path), f"failed to open PDF: {e}") from e

    if not text_parts:
        logger.warning(f"No extractable text in {path.name}")
    return "\n".join(text_parts)


def _read_excel(path: Path) -> str:
    """Render the first sheet as CSV so it flows through the delimited parser."""
    try:
        df = pd.read_excel(path, sheet_name=0)
    except Exception as e:
        raise StatementReadError(str(path), f"failed to read workbook: {e}") from e

    df = df.dropna(how="all")
    for column in df.columns:
        if pd.api.types.is_datetime64_any_dtype(df[column]):
            df[column] = df[column].dt.strftime("%Y-%m-%d")

    return df.to_csv(index=False)
