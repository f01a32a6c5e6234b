"""
Utility functions for statement parsers.

Provides deduplication and consolidation helpers.
"""

from typing import Iterable, List

from stmtnorm.core.models import ParseResult, Transaction


def deduplicate(candidates: Iterable[Transaction]) -> List[Transaction]:
    """
    Remove transactions derived more than once from the same source data.

    Two candidates are duplicates when (date, description, amount) are
    equal; the first one seen is kept and input order is preserved.

    Args:
        candidates: Unioned candidates from all strategies

    Returns:
        Unique transactions in first-seen order
    """
    seen = set()
    unique_transactions = []

    for txn in candidates:
        if txn.key in seen:
            continue
        seen.add(txn.key)
        unique_transactions.append(txn)

    return unique_transactions


def consolidate_transactions(results: Iterable[ParseResult], sort: bool = True) -> List[Transaction]:
    """
    Consolidate transactions from multiple parse results.

    - Merges transactions from all successful results
    - Removes duplicates based on (date, description, amount)
    - Sorts by date (oldest first), keeping document order within a day

    Args:
        results: List of ParseResult objects
        sort: Sort the merged list by date

    Returns:
        List of unique transactions
    """
    all_transactions = []
    for result in results:
        if result.success and result.transactions:
            all_transactions.extend(result.transactions)

    unique_transactions = deduplicate(all_transactions)
    if sort:
        unique_transactions.sort(key=lambda t: t.date)
    return unique_transactions
