"""Input handling (paste, upload, demo) for the Streamlit app."""
from __future__ import annotations

import pandas as pd
import streamlit as st

from config.settings import (
    DEFAULT_DELIMITER,
    DEFAULT_LANGUAGE,
    DEMO_LANGUAGE,
    DEMO_TEXT,
    MESSAGES,
    TTS_SIDES,
    get_delimiter_choices,
)
from core.errors import InputError
from core.parsing import decode_text, parse_rows, resolve_field_delimiter

from . import ui_helpers
from .ui_models import InputConfig


def upload_token_for(uploaded_file) -> str:
    return f"{getattr(uploaded_file, 'name', '')}|{getattr(uploaded_file, 'size', '')}"


def should_load_upload(state, upload_token: str) -> bool:
    """True when the uploader holds a file whose text has not been loaded (or cleared) yet."""

    return state.get("upload_token") != upload_token or state.get("manual_override_token") not in (
        None,
        upload_token,
    )


def clear_inputs(state) -> None:
    """Empty the input but remember the current upload so it is not reloaded on rerun."""

    current_upload_token = state.get("upload_token")
    state.raw_text = ""
    state.parsed_rows = []
    state.results = []
    state.last_error = None
    state.output_text = ""
    # Keep upload_token untouched so the uploaded file is not reloaded immediately.
    state.manual_override_token = current_upload_token


def render_input_section() -> InputConfig:
    """Render paste/upload widgets plus separator, side and language pickers."""

    state = st.session_state

    col_demo, col_clear = st.columns([1, 1])
    with col_demo:
        if st.button("Try demo", type="secondary"):
            state.raw_text = DEMO_TEXT
            state.language_code = DEMO_LANGUAGE
            state.results = []
            state.last_error = None
            state.manual_override_token = state.get("upload_token")
            ui_helpers.toast("Demo cards loaded", icon="✅", variant="success")
    with col_clear:
        if st.button("Clear", type="secondary"):
            clear_inputs(state)

    uploaded_file = st.file_uploader(
        MESSAGES["uploader_label"],
        type=["txt", "csv", "tsv"],
        accept_multiple_files=False,
        key="file_uploader",
    )
    if uploaded_file is not None:
        upload_token = upload_token_for(uploaded_file)
        if should_load_upload(state, upload_token):
            try:
                state.raw_text = decode_text(uploaded_file.read())
            except InputError as exc:
                st.error(str(exc))
                state.raw_text = ""
            state.upload_token = upload_token
            state.manual_override_token = None
            state.results = []
            ui_helpers.toast("Input replaced with uploaded file", icon="📄")

    raw_text = st.text_area(MESSAGES["input_label"], key="raw_text", height=220)

    col_sep, col_side, col_lang = st.columns([1, 1, 1])
    choices = get_delimiter_choices()
    with col_sep:
        separator = st.selectbox(
            MESSAGES["separator_label"],
            choices,
            index=choices.index(DEFAULT_DELIMITER),
            key="separator",
        )
    with col_side:
        side = st.radio(MESSAGES["side_label"], TTS_SIDES, horizontal=True, key="tts_side")
    with col_lang:
        state.setdefault("language_code", DEFAULT_LANGUAGE)
        language_code = st.text_input(MESSAGES["language_label"], key="language_code")

    config = InputConfig(
        raw_text=raw_text or "",
        separator=separator,
        tts_front=str(side).lower() == "front",
        language_code=(language_code or "").strip(),
    )
    state.parsed_rows = _parse_for_preview(config)
    return config


def _parse_for_preview(config: InputConfig) -> list:
    if not config.raw_text.strip():
        return []
    try:
        delimiter = resolve_field_delimiter(config.separator)
    except InputError:
        return []
    return parse_rows(config.raw_text, delimiter)


def render_parsed_rows(state, config: InputConfig, limit: int) -> None:
    """Show how the pasted text was split, with the TTS column marked."""

    rows = state.get("parsed_rows") or []
    if not config.raw_text.strip():
        st.info("Paste flashcards above, upload a file or click **Try demo**")
        return
    if not rows:
        st.warning(MESSAGES["no_rows"].format(separator=config.separator))
        return

    st.subheader("🔍 Parsed rows")
    tts_col = "Front (TTS)" if config.tts_front else "Front"
    back_col = "Back" if config.tts_front else "Back (TTS)"
    preview_df = pd.DataFrame(
        [{tts_col: row.side_a, back_col: row.side_b} for row in rows[:limit]]
    )
    st.caption(f"Rows: {len(rows)}" + (f" • showing first {limit}" if len(rows) > limit else ""))
    st.dataframe(preview_df, width="stretch")
