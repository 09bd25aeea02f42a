"""
Feedback Button UI

Renders the six recall-quality buttons.
"""

from __future__ import annotations

from typing import Optional

import streamlit as st

from core import srs


def render_feedback_buttons(key_suffix: str = "") -> Optional[srs.Quality]:
    """
    Render quality rating buttons (0-5).

    Returns:
        Quality selected by user, or None if no button clicked
    """
    st.markdown("**How well did you remember this word?**")

    selected = None
    rows = [list(srs.Quality)[:3], list(srs.Quality)[3:]]
    for row in rows:
        columns = st.columns(len(row))
        for column, quality in zip(columns, row):
            with column:
                if st.button(
                    srs.QUALITY_LABELS[quality],
                    key=f"quality_{int(quality)}_{key_suffix}",
                    help=srs.QUALITY_DESCRIPTIONS[quality],
                    use_container_width=True,
                ):
                    selected = quality
    return selected
