"""
Word Details UI

Renders supporting information for the current word.
"""

import streamlit as st

from core import srs
from core.srs.progress import WordProgress


def render_word_details(item: WordProgress):
    """
    Render word details expander with the word's metadata and review stats.
    """
    word = item.word or {}
    with st.expander("📖 Details"):
        if word.get("part_of_speech"):
            st.caption(f"**Part of Speech:** {word['part_of_speech'].title()}")
        if word.get("example"):
            st.caption(f"**Example:** {word['example']}")

        if item.is_new:
            st.caption("New word")
            return

        average_quality = srs.calculate_average_quality(item.review_history)
        mastery = srs.calculate_mastery_level(item.repetition_level, average_quality)
        col1, col2, col3 = st.columns(3)
        with col1:
            st.caption(f"**Level:** {item.repetition_level}")
        with col2:
            st.caption(f"**Ease:** {item.easiness_factor / 100:.2f}")
        with col3:
            st.caption(f"**Mastery:** {mastery}%")
