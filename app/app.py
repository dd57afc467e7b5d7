"""Streamlit entry point for the Anki TTS Flashcards Builder app."""
from __future__ import annotations

from pathlib import Path
import sys

import streamlit as st

if __package__ is None or __package__ == "":
    package_root = Path(__file__).resolve().parent
    sys.path.insert(0, str(package_root.parent))
    __package__ = "app"  # type: ignore[misc]

# Ensure project root on sys.path when run via ``streamlit run app/app.py``
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from config.settings import (  # noqa: E402
    MESSAGES as CFG_MESSAGES,
    OUTPUT_FILE_PATH as CFG_OUTPUT_FILE_PATH,
    OUTPUT_LINETERMINATOR as CFG_OUTPUT_EOL,
    PAGE_LAYOUT as CFG_PAGE_LAYOUT,
    PAGE_TITLE as CFG_PAGE_TITLE,
    PREVIEW_LIMIT as CFG_PREVIEW_LIMIT,
)

from . import ui_helpers  # noqa: E402
from .batch_runner import BatchRunner  # noqa: E402
from .export_panel import render_export_section  # noqa: E402
from .input_ui import render_input_section, render_parsed_rows  # noqa: E402
from .preview_panel import render_preview_section  # noqa: E402
from .sidebar import render_sidebar  # noqa: E402
from .ui_models import ExportConfig  # noqa: E402


@st.cache_resource
def _init_logging() -> bool:
    ui_helpers.configure_file_logging()
    return True


st.set_page_config(page_title=CFG_PAGE_TITLE, layout=CFG_PAGE_LAYOUT)

_init_logging()

ui_helpers.ensure_session_defaults()

run_settings = render_sidebar()
export_config = ExportConfig(
    output_path=Path(CFG_OUTPUT_FILE_PATH),
    line_terminator=CFG_OUTPUT_EOL,
)

st.title(CFG_MESSAGES["app_title"])

with st.expander("ℹ️ Quick help", expanded=False):
    st.markdown(
        """
1. Paste two-column flashcards (one card per line) or upload a file.
2. Pick the separator, the side that should be read aloud and its language code.
3. Check the Anki media folder in the sidebar (Anki → Tools → Check Media shows it).
4. Press **Fetch audio and build file** — every row gets an MP3 in the media folder.
5. In Anki Desktop: File → Import → select the downloaded file, enable **Allow HTML**, confirm field mapping.
        """
    )

input_config = render_input_section()
render_parsed_rows(st.session_state, input_config, CFG_PREVIEW_LIMIT)

can_run = bool(st.session_state.get("parsed_rows")) and bool(input_config.language_code)
if st.button(CFG_MESSAGES["run_button"], type="primary", disabled=not can_run):
    runner = BatchRunner(
        inputs=input_config,
        settings=run_settings,
        export_config=export_config,
        state=st.session_state,
        progress=st.progress(0.0),
        status=st.empty(),
    )
    if runner.run():
        ui_helpers.toast(f"Audio added to {len(st.session_state.results)} cards", icon="🔊", variant="success")

if st.session_state.get("last_error"):
    st.error(st.session_state.last_error)

render_preview_section(st.session_state)
render_export_section(st.session_state, export_config)

st.caption(
    "Tips: 1) HTML tags are stripped before synthesis, so <b>bold</b> cards read fine. "
    "2) Lower the parallel requests if Google starts answering 429."
)
