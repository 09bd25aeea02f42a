"""
Session Statistics UI

Renders progress metrics, completion summary and controls.
"""

import streamlit as st

from core.review_session import SessionState


def render_session_stats(state: SessionState) -> bool:
    """
    Render session progress metrics and exit button.

    Returns:
        True if quit button was clicked, False otherwise
    """
    view = state.view()
    if not view.total or state.is_completed:
        return False

    col1, col2, col3, col4 = st.columns([2, 2, 2, 1])

    with col1:
        st.metric("Progress", f"{view.index + 1}/{view.total}")

    with col2:
        st.metric("Reviewed", state.stats.total)

    with col3:
        if state.stats.total > 0:
            st.metric("Remembered", f"{state.stats.remembered_ratio * 100:.0f}%")

    with col4:
        st.markdown("<br>", unsafe_allow_html=True)  # Align with metrics
        if st.button("❌", help="Quit session", use_container_width=True):
            return True

    st.divider()
    return False


def render_session_complete(state: SessionState) -> bool:
    """
    Render the completion summary.

    Returns:
        True if "Review again" was clicked
    """
    stats = state.stats
    st.success(f"🎉 Review session complete! You reviewed {stats.total} words.")
    st.progress(stats.remembered_ratio, text=f"Remembered {stats.remembered}/{stats.total}")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Remembered", stats.remembered)
    with col2:
        st.metric("Learning", stats.learning)
    with col3:
        st.metric("Struggled", stats.struggled)

    return st.button("Review again", type="primary", use_container_width=True)
