"""Run helpers for the build page: drives the TTS pipeline and updates session state."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Optional

from config.settings import MESSAGES
from core.errors import BuilderError, FetchError, StoreError
from core.export import generate_lines
from core.flashcards import BuildOptions, build_flashcards
from core.parsing import Row

from .ui_models import ExportConfig, InputConfig, RunSettings


@dataclass
class BatchRunner:
    """Runs one build and stores results/errors in session state."""

    inputs: InputConfig
    settings: RunSettings
    export_config: ExportConfig
    state: Any
    progress: Any
    status: Any

    def run(self) -> bool:
        self.state.results = []
        self.state.last_error = None
        self.state.output_text = ""
        self.state.output_path = None

        if self.settings.media_dir is None:
            self._fail("Set the Anki media folder in the sidebar first.")
            return False

        options = BuildOptions(
            separator=self.inputs.separator,
            language_code=self.inputs.language_code,
            media_dir=self.settings.media_dir,
            tts_front=self.inputs.tts_front,
            output_path=self.export_config.output_path,
            max_workers=self.settings.max_workers,
            timeout=self.settings.timeout,
            preserve_order=self.settings.preserve_order,
        )
        total = len(self.state.get("parsed_rows") or [])
        started = time.time()

        def _on_admit(idx: int, row: Row) -> None:
            # Called on the script thread, so widgets can be updated here
            admitted = idx + 1
            self.progress.progress(min(1.0, admitted / max(total, 1)))
            self.status.caption(
                MESSAGES["processing_fmt"].format(
                    front=row.side_a, separator=self.inputs.separator, back=row.side_b
                )
                + f" • {admitted}/{total}"
            )

        try:
            result = build_flashcards(self.inputs.raw_text, options, on_admit=_on_admit)
        except BuilderError as exc:
            self._fail(_describe_error(exc))
            return False

        elapsed = max(0.001, time.time() - started)
        self.progress.progress(1.0)
        self.status.caption(
            f"{MESSAGES['done']} {len(result.rows)} rows in {elapsed:.1f}s • {len(result.rows) / elapsed:.2f}/s"
        )
        self.state.results = result.rows
        self.state.output_path = str(result.output_path)
        self.state.output_text = generate_lines(result.rows, self.export_config.line_terminator)
        return True

    def _fail(self, message: str) -> None:
        self.state.last_error = message
        self.status.caption("Stopped: nothing was written.")


def _describe_error(exc: BuilderError) -> str:
    """User-facing text with the failing card text and HTTP/IO reason."""

    if isinstance(exc, FetchError):
        detail: Optional[str] = f"HTTP {exc.status_code}" if exc.status_code is not None else exc.reason
        return f"TTS request failed for '{exc.text}': {detail}"
    if isinstance(exc, StoreError):
        return f"Could not save audio to {exc.path}: {exc.reason}"
    return str(exc)
