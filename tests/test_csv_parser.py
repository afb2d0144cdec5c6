"""Tests for quote-aware CSV line splitting."""

from __future__ import annotations

from pomolog.storage.csv_parser import parse_line, split_lines


def test_plain_fields() -> None:
    assert parse_line("a,b,c") == ["a", "b", "c"]


def test_quoted_commas_stay_in_field_and_quotes_are_dropped() -> None:
    assert parse_line('"Read, then write",2,"x"') == ["Read, then write", "2", "x"]


def test_leading_blank_column() -> None:
    assert parse_line(',"Start","End"') == ["", "Start", "End"]


def test_empty_line_is_single_empty_field() -> None:
    assert parse_line("") == [""]


def test_doubled_quotes_are_not_escapes() -> None:
    # Each quote toggles state, so "" is just an empty quoted run.
    assert parse_line('"say ""hi""",b') == ["say hi", "b"]


def test_unbalanced_quote_keeps_rest_in_last_field() -> None:
    assert parse_line('a,"b,c,d') == ["a", "b,c,d"]


def test_split_lines_handles_mixed_newlines() -> None:
    assert split_lines("a\r\nb\nc\rd") == ["a", "b", "c", "d"]
