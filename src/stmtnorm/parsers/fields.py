"""
Quote-aware field splitting for delimited statement rows.

The splitter is a two-state machine {NORMAL, IN_QUOTES}:
- '"' at the start of a field opens a quoted value; anywhere else in an
  unquoted field it is a literal character (e.g. an inch mark: 55" TV)
- inside quotes, '""' emits a literal '"' and a lone '"' closes the value
- the delimiter only ends a field in NORMAL state
- fields are trimmed of surrounding whitespace
"""

from enum import Enum
from typing import Iterator, List, Sequence, Tuple

CANDIDATE_DELIMITERS = (",", ";", "\t", "|")


class _State(Enum):
    NORMAL = "normal"
    IN_QUOTES = "in_quotes"


def _scan(line: str, delimiter: str) -> Tuple[List[str], _State]:
    values: List[str] = []
    current: List[str] = []
    state = _State.NORMAL
    i = 0

    while i < len(line):
        char = line[i]

        if state is _State.IN_QUOTES:
            if char == '"' and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            elif char == '"':
                state = _State.NORMAL
            else:
                current.append(char)
        elif char == '"' and not "".join(current).strip():
            state = _State.IN_QUOTES
        elif char == delimiter:
            values.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    values.append("".join(current).strip())
    return values, state


def split_fields(line: str, delimiter: str = ",") -> List[str]:
    """
    Split one record into fields, honoring double-quoted values.

    Args:
        line: Raw record text (may contain newlines inside quotes)
        delimiter: Single-character field separator

    Returns:
        List of trimmed, quote-unescaped field values
    """
    return _scan(line, delimiter)[0]


def has_open_quote(text: str, delimiter: str = ",") -> bool:
    """Check if a quoted field is still open at the end of text."""
    return _scan(text, delimiter)[1] is _State.IN_QUOTES


def iter_records(
    lines: Sequence[str],
    delimiter: str = ",",
    start_line: int = 1,
) -> Iterator[Tuple[int, List[str]]]:
    """
    Yield (line_number, fields) for each non-blank record.

    Physical lines are joined while a quoted field is open, so a quoted value
    may span several lines.

    Args:
        lines: Physical lines (without line terminators)
        delimiter: Field separator
        start_line: 1-based line number of lines[0]
    """
    buffer = None
    buffer_line = start_line

    for offset, raw in enumerate(lines):
        line = raw.rstrip("\r")
        if buffer is None:
            if not line.strip():
                continue
            buffer = line
            buffer_line = start_line + offset
        else:
            buffer = buffer + "\n" + line

        if has_open_quote(buffer, delimiter):
            continue

        yield buffer_line, split_fields(buffer, delimiter)
        buffer = None

    if buffer is not None and buffer.strip():
        # Unterminated quote: split what we have
        yield buffer_line, split_fields(buffer, delimiter)


def count_fields(line: str, delimiter: str) -> int:
    return len(split_fields(line, delimiter))
