"""Shared dataclasses for UI configuration objects."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class InputConfig:
    """What the user pasted and how it should be split."""

    raw_text: str
    separator: str
    tts_front: bool
    language_code: str


@dataclass
class ExportConfig:
    """Settings used for the output file / download panel."""

    output_path: Path
    line_terminator: str


@dataclass
class RunSettings:
    """Per-run pipeline knobs collected from the sidebar."""

    media_dir: Optional[Path]
    max_workers: int
    timeout: float
    preserve_order: bool
