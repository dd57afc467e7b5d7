"""Export of enriched rows as an Anki-importable text file."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from config.settings import OUTPUT_LINETERMINATOR
from core.errors import WriteError
from core.pipeline import EnrichedRow

__all__ = ["generate_lines", "write_rows"]

logger = logging.getLogger(__name__)


def generate_lines(rows: Iterable[EnrichedRow], line_terminator: str = OUTPUT_LINETERMINATOR) -> str:
    """Serialize rows as ``front<delim>back`` lines, in the order given.

    Fields are written verbatim (no CSV quoting): the parser guarantees that
    neither side contains the delimiter, and Anki expects the HTML untouched.
    """

    return "".join(f"{row.to_line()}{line_terminator}" for row in rows)


def write_rows(
    rows: Iterable[EnrichedRow],
    output_path: Path | str,
    *,
    line_terminator: str = OUTPUT_LINETERMINATOR,
) -> Path:
    """Write (overwrite) ``output_path`` with one line per row."""

    path = Path(output_path)
    rows = list(rows)
    content = generate_lines(rows, line_terminator=line_terminator)
    try:
        with path.open("w", encoding="utf-8", newline="") as fh:
            fh.write(content)
    except OSError as err:
        raise WriteError(f"Failed to write {path}: {err.strerror or err}") from err
    logger.info("Wrote %s lines to %s", len(rows), path)
    return path
