# core/parsing.py
# Input parsing for the TTS builder: pasted two-column text -> ordered flashcard rows.
from __future__ import annotations
import codecs
import re
from dataclasses import dataclass
from typing import List, Optional

from config.settings import DELIMITER_ALIASES, FIELD_DELIMITERS, MESSAGES
from core.errors import InputError

__all__ = ["Row", "decode_text", "parse_rows", "resolve_field_delimiter", "split_lines"]

# Terminal pastes end lines with \r; files use \n or \r\n
RE_ANY_NEWLINE = re.compile(r"\r\n|\r|\n")


@dataclass(frozen=True)
class Row:
    """One flashcard: both faces, trimmed and non-empty."""

    side_a: str
    side_b: str


def resolve_field_delimiter(choice: Optional[str]) -> str:
    """Map a separator choice (';', ',', '<tab>', 'space', ...) to the character itself."""
    if choice is None or choice == "":
        raise InputError(MESSAGES["no_separator"])
    if choice in ("\t", " "):
        return choice
    key = DELIMITER_ALIASES.get(choice.strip().lower(), choice.strip())
    if key not in FIELD_DELIMITERS:
        raise InputError(f"Unsupported separator: {choice!r}")
    return FIELD_DELIMITERS[key]


def decode_text(data: bytes) -> str:
    """Decode uploaded or piped bytes: UTF-16 when BOM-marked, otherwise UTF-8."""
    try:
        if data[:2] in (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE):
            return data.decode("utf-16")
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as err:
        raise InputError(MESSAGES["bad_encoding"]) from err


def split_lines(raw_text: Optional[str], line_delimiter: Optional[str] = None) -> List[str]:
    """Split raw text into non-blank candidate lines (untrimmed)."""
    if not raw_text:
        return []
    if line_delimiter is None:
        parts = RE_ANY_NEWLINE.split(raw_text)
    else:
        parts = raw_text.split(line_delimiter)
    return [part for part in parts if part.strip()]


def _parse_line(line: str, field_delimiter: str) -> Row | None:
    fields = line.split(field_delimiter)
    if len(fields) != 2:
        return None
    side_a, side_b = (field.strip() for field in fields)
    if not side_a or not side_b:
        return None
    return Row(side_a, side_b)


def parse_rows(
    raw_text: Optional[str],
    field_delimiter: str,
    line_delimiter: Optional[str] = None,
) -> List[Row]:
    """
    Parse pasted flashcards into rows, preserving input order.

    Notes:
    - Blank lines are skipped.
    - Lines that do not split into exactly two non-blank fields are dropped.
    - An empty result is not an error here; callers decide how to report it.
    """
    if not field_delimiter:
        raise InputError(MESSAGES["no_separator"])

    rows: List[Row] = []
    for line in split_lines(raw_text, line_delimiter):
        parsed = _parse_line(line, field_delimiter)
        if parsed is not None:
            rows.append(parsed)
    return rows
