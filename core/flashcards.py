"""core.flashcards

End-to-end build: pasted text -> rows -> TTS pipeline -> output file.

Validation happens before any network call, and the output file is only
written when every row succeeded. Streamlit-agnostic; the CLI and the app
share it.
"""
from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional

from config.settings import (
    MESSAGES,
    OUTPUT_FILE_PATH,
    TTS_MAX_WORKERS,
    TTS_REQUEST_TIMEOUT,
)
from core.audio import AudioAsset, fetch_audio
from core.errors import BuilderError, InputError, PipelineError
from core.export import write_rows
from core.media import store_audio
from core.parsing import Row, parse_rows, resolve_field_delimiter
from core.pipeline import AdmitFn, EnrichedRow, ProgressFn, TtsPipeline

__all__ = ["BuildOptions", "BuildResult", "build_flashcards", "prepare_rows"]

logger = logging.getLogger(__name__)


@dataclass
class BuildOptions:
    """Everything the user chooses for one run."""

    separator: str
    language_code: str
    media_dir: Path
    tts_front: bool = True
    output_path: Path = Path(OUTPUT_FILE_PATH)
    max_workers: int = TTS_MAX_WORKERS
    timeout: Optional[float] = TTS_REQUEST_TIMEOUT
    preserve_order: bool = True
    line_delimiter: Optional[str] = None


@dataclass
class BuildResult:
    output_path: Path
    media_dir: Path
    rows: List[EnrichedRow] = field(default_factory=list)


def prepare_rows(raw_text: Optional[str], options: BuildOptions) -> List[Row]:
    """Validate user input and parse it; raise InputError when nothing usable remains."""

    if raw_text is None or not raw_text.strip():
        raise InputError(MESSAGES["no_input"])
    delimiter = resolve_field_delimiter(options.separator)
    if not (options.language_code or "").strip():
        raise InputError(MESSAGES["no_language"])

    rows = parse_rows(raw_text, delimiter, options.line_delimiter)
    if not rows:
        raise InputError(MESSAGES["no_rows"].format(separator=options.separator))
    return rows


def build_flashcards(
    raw_text: Optional[str],
    options: BuildOptions,
    *,
    fetch: Optional[Callable[[Row], AudioAsset]] = None,
    store: Optional[Callable[[AudioAsset], str]] = None,
    progress_cb: Optional[ProgressFn] = None,
    on_admit: Optional[AdmitFn] = None,
) -> BuildResult:
    """Run the whole flow; raise the first pipeline error instead of writing a partial file."""

    rows = prepare_rows(raw_text, options)
    delimiter = resolve_field_delimiter(options.separator)
    language_code = options.language_code.strip()

    if fetch is None:
        fetch = functools.partial(
            fetch_audio,
            use_first_side=options.tts_front,
            language_code=language_code,
            timeout=options.timeout,
        )
    if store is None:
        store = functools.partial(store_audio, media_dir=options.media_dir)

    pipeline = TtsPipeline(
        fetch,
        store,
        field_delimiter=delimiter,
        use_first_side=options.tts_front,
        concurrency=options.max_workers,
        preserve_order=options.preserve_order,
        progress_cb=progress_cb,
        on_admit=on_admit,
    )
    outcome = pipeline.run(rows)
    if not outcome.ok:
        logger.error(
            "Run aborted (%s of %s rows finished, nothing written): %s",
            len(outcome.partial_rows),
            len(rows),
            outcome.error,
        )
        if isinstance(outcome.error, BuilderError):
            raise outcome.error
        raise PipelineError(f"Unexpected error while processing rows: {outcome.error}") from outcome.error

    output_path = write_rows(outcome.rows, options.output_path)
    return BuildResult(output_path=output_path, media_dir=Path(options.media_dir), rows=outcome.rows)
