"""Minimal quote-aware CSV line splitting.

The goal and ledger files come from spreadsheet exports and hand edits,
so this dialect is deliberately simple: a double quote always toggles
quoted mode and is dropped from the output, and doubled quotes are not
treated as escapes. Malformed input never raises; an unbalanced quote
just leaves the rest of the line in the last field.
"""

from __future__ import annotations

QUOTE = '"'
DELIMITER = ","


def parse_line(raw: str) -> list[str]:
    """Split one CSV line into fields."""
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in raw:
        if char == QUOTE:
            in_quotes = not in_quotes
        elif char == DELIMITER and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)

    fields.append("".join(current))
    return fields


def split_lines(text: str) -> list[str]:
    """Split file content into lines, accepting any newline convention."""
    return text.splitlines()
