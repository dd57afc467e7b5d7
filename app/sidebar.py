"""Sidebar rendering for the Streamlit app."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import streamlit as st

from config.settings import (
    ANKI_MEDIA_DIR_ENV,
    ANKI_PROFILE,
    MESSAGES,
    TTS_MAX_WORKERS,
    TTS_REQUEST_TIMEOUT,
    WORKERS_SLIDER_MAX,
)
from core.errors import InputError
from core.media import resolve_media_dir
from core.pipeline import default_concurrency

from . import ui_helpers
from .ui_models import RunSettings


def _default_media_dir(profile: str) -> str:
    override = ui_helpers.get_secret(ANKI_MEDIA_DIR_ENV)
    if override:
        return str(override)
    try:
        return str(resolve_media_dir(profile))
    except InputError:
        return ""


def render_sidebar() -> RunSettings:
    """Render sidebar controls and return collected configuration."""

    st.sidebar.header("📁 Anki")
    profile = st.sidebar.text_input("Anki profile", value=ANKI_PROFILE, key="anki_profile")
    media_raw = st.sidebar.text_input(
        MESSAGES["media_dir_label"],
        value=_default_media_dir(profile),
        key=f"media_dir__{profile}",
        help="Audio files are written here. The folder must already exist.",
    )
    media_dir: Optional[Path] = Path(media_raw).expanduser() if media_raw.strip() else None
    if media_dir is not None and not media_dir.is_dir():
        st.sidebar.warning("Folder not found — start Anki once or fix the path.")

    st.sidebar.header("⚙️ Requests")
    default_workers = TTS_MAX_WORKERS or default_concurrency()
    max_workers = st.sidebar.slider(
        MESSAGES["workers_label"],
        min_value=1,
        max_value=max(WORKERS_SLIDER_MAX, default_workers),
        value=default_workers,
        help="At most this many TTS requests run at the same time.",
    )
    timeout = st.sidebar.number_input(
        "Request timeout (s)",
        min_value=1.0,
        max_value=300.0,
        value=float(TTS_REQUEST_TIMEOUT),
        step=5.0,
    )
    preserve_order = st.sidebar.checkbox(
        "Keep input order in output",
        value=True,
        help="Unchecked: rows are written in the order their audio finished.",
    )

    return RunSettings(
        media_dir=media_dir,
        max_workers=int(max_workers),
        timeout=float(timeout),
        preserve_order=bool(preserve_order),
    )
