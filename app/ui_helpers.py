"""Streamlit UI helper utilities for the Anki TTS Flashcards Builder app."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Optional

import streamlit as st

from config.settings import LOG_DIR, LOG_FILE_NAME, LOG_FORMAT


def get_secret(name: str) -> Optional[str]:
    """Return Streamlit secret or env var by name."""

    try:
        return st.secrets[name]
    except Exception:
        return os.environ.get(name)


def toast(message: str, *, icon: Optional[str] = None, variant: str = "info") -> None:
    """Show toast with optional fallback for older Streamlit versions."""

    toast_fn = getattr(st, "toast", None)
    if callable(toast_fn):
        kwargs: Dict[str, str] = {}
        if icon:
            kwargs["icon"] = icon
        toast_fn(message, **kwargs)
        return

    fallback_msg = f"{icon} {message}" if icon else message
    if variant == "success":
        st.success(fallback_msg)
    elif variant == "warning":
        st.warning(fallback_msg)
    else:
        st.info(fallback_msg)


def ensure_session_defaults() -> None:
    """Populate session_state with defaults expected by the UI."""

    state = st.session_state
    state.setdefault("raw_text", "")
    state.setdefault("parsed_rows", [])
    state.setdefault("results", [])
    state.setdefault("last_error", None)
    state.setdefault("output_text", "")
    state.setdefault("output_path", None)
    state.setdefault("upload_token", None)
    state.setdefault("manual_override_token", None)


def configure_file_logging(log_dir: Path | str = LOG_DIR) -> logging.Logger:
    """Send ``core.*`` debug logs to ``logs/pipeline.debug.log`` (reset per app start)."""

    directory = Path(log_dir)
    directory.mkdir(exist_ok=True)

    core_logger = logging.getLogger("core")
    core_logger.setLevel(logging.DEBUG)
    core_logger.propagate = False  # keep Streamlit's console quiet

    handler = logging.FileHandler(directory / LOG_FILE_NAME, mode="w", encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    for old in list(core_logger.handlers):
        old.close()
    core_logger.handlers.clear()
    core_logger.addHandler(handler)
    return core_logger
