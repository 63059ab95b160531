"""Split raw CSV text into rows of string fields.

Quotes toggle an "inside field" flag so commas inside quotes survive.
Multi-line quoted values and doubled-quote escapes are not supported.
"""

from __future__ import annotations

RawTable = list[list[str]]


def split_line(line: str) -> list[str]:
    """Split one line on commas outside double quotes; fields are trimmed."""
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    fields.append("".join(current).strip())
    return fields


def tokenize(text: str) -> RawTable:
    """Tokenize CSV text into a table whose first row is the header.

    Returns an empty list for empty or whitespace-only input.
    """
    text = (text or "").strip()
    if not text:
        return []
    return [split_line(line) for line in text.split("\n")]
