"""Export widgets for the generated Anki import file."""
from __future__ import annotations

from typing import Any

import streamlit as st

from config.settings import MESSAGES

from .ui_models import ExportConfig


def render_export_section(state: Any, export_config: ExportConfig) -> None:
    """Render the download button and the Anki import hint."""

    output_text = state.get("output_text") or ""
    if not output_text:
        return

    output_path = state.get("output_path") or str(export_config.output_path)
    st.success(MESSAGES["import_hint_fmt"].format(path=output_path))
    st.download_button(
        label=MESSAGES["download_label"].format(name=export_config.output_path.name),
        data=output_text,
        file_name=export_config.output_path.name,
        mime="text/csv",
        key="download_output",
    )
