"""
Header structure detection for delimited statements.

Maps header labels to semantic fields (date, description, debit, credit,
amount, ...) using the per-field synonym lists from the normalizer config.

Usage:
    from stmtnorm.parsers.headers import detect_header_structure

    structure = detect_header_structure(["Trans. Date", "NARRATION", "Debit", "Credit"])
    structure.date               # 0
    structure.has_separate_columns  # True
"""

import re
from typing import Optional, Sequence

from stmtnorm.core.config import DEFAULT_CONFIG, HEADER_FIELDS, NormalizerConfig
from stmtnorm.core.models import HeaderStructure

NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_label(label: Optional[str]) -> str:
    """Lowercase a header label and strip everything but letters and digits."""
    if label is None:
        return ""
    return NON_ALNUM.sub("", str(label).lower().strip())


def find_header_index(headers: Sequence[str], synonyms: Sequence[str]) -> Optional[int]:
    """
    Find the column matching a field's synonyms.

    Synonyms are tried in priority order; for each one the first column whose
    normalized label equals it, is contained in it, or contains it wins.
    Blank labels never match.

    Args:
        headers: Header labels in column order
        synonyms: Field synonyms, highest priority first

    Returns:
        Zero-based column index, or None if no column matches
    """
    normalized = [normalize_label(h) for h in headers]

    for synonym in synonyms:
        target = normalize_label(synonym)
        if not target:
            continue
        for index, label in enumerate(normalized):
            if not label:
                continue
            if label == target or target in label or label in target:
                return index

    return None


def detect_header_structure(
    headers: Sequence[str],
    config: Optional[NormalizerConfig] = None,
) -> HeaderStructure:
    """
    Detect which column holds which semantic field.

    Args:
        headers: Header labels from the first row
        config: Optional config supplying the synonym tables

    Returns:
        HeaderStructure (read-only, one per document)
    """
    config = config or DEFAULT_CONFIG
    indices = {
        field_name: find_header_index(headers, config.synonyms_for(field_name))
        for field_name in HEADER_FIELDS
    }
    return HeaderStructure(headers=tuple(str(h).strip() for h in headers), **indices)
