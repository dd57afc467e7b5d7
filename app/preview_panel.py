"""Preview table rendering for enriched rows."""
from __future__ import annotations

from typing import Any

import pandas as pd
import streamlit as st

from core.pipeline import EnrichedRow


def results_frame(results: list[EnrichedRow]) -> pd.DataFrame:
    """Tabular view of enriched rows, in the order they will be written."""

    return pd.DataFrame(
        [
            {"Front": row.front_with_audio, "Back": row.back, "Audio file": row.sound_file}
            for row in results
        ],
        columns=["Front", "Back", "Audio file"],
    )


def render_preview_section(state: Any) -> None:
    """Render the results preview table."""

    with st.container():
        st.subheader("📋 Preview")
        results = state.get("results") or []
        if results:
            st.caption(f"Rows with audio: {len(results)}")
            st.dataframe(results_frame(results), width="stretch")
        else:
            st.info("No results yet — run the build to populate preview.")
