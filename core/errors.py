"""Error taxonomy shared by the parser, the TTS pipeline and the exporters."""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

__all__ = [
    "BuilderError",
    "InputError",
    "FetchError",
    "StoreError",
    "WriteError",
    "PipelineError",
]


class BuilderError(RuntimeError):
    """Base class for every failure surfaced to the CLI/UI."""


class InputError(BuilderError):
    """User input is unusable (no data, no delimiter, no valid rows, ...)."""


class FetchError(BuilderError):
    """TTS request failed: non-success HTTP status or transport error."""

    def __init__(self, text: str, status_code: Optional[int] = None, reason: str = "") -> None:
        self.text = text
        self.status_code = status_code
        self.reason = reason
        detail = f"HTTP {status_code}" if status_code is not None else (reason or "network error")
        super().__init__(f"Error while fetching TTS for '{text}': {detail}")


class StoreError(BuilderError):
    """Audio bytes could not be written to the media directory."""

    def __init__(self, path: Union[str, Path], reason: str, text: str = "") -> None:
        self.path = Path(path)
        self.reason = reason
        self.text = text
        prefix = f"Error while saving audio for '{text}'" if text else "Error while saving audio"
        super().__init__(f"{prefix} to {self.path}: {reason}")


class WriteError(BuilderError):
    """Output file could not be written."""


class PipelineError(BuilderError):
    """Unexpected failure inside a fetch/store step; the original is chained as ``__cause__``."""
