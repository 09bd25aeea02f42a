"""
Progress page rendering.
"""

from __future__ import annotations

import streamlit as st

from app.session_controller import cached_mastery_table, cached_overview, invalidate_review_caches


def render_progress_page(user_options: dict[str, str]) -> None:
    del user_options  # reserved for future sign-in integration

    st.subheader("Learning Progress")
    st.caption(f"User: {st.session_state.user_label} ({st.session_state.user_id})")

    if st.button("Refresh Progress", use_container_width=False):
        invalidate_review_caches()
        st.rerun()

    overview = cached_overview(st.session_state.user_id)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Total Words", f"{overview.total_words:,}")
    with col2:
        st.metric("Mastered", f"{overview.mastered_count:,}", help="Repetition level 5 or higher")
    with col3:
        st.metric("Learning", f"{overview.learning_count:,}")
    with col4:
        st.metric("Due Now", f"{overview.due_count:,}")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Average Ease", f"{overview.average_easiness_factor:.2f}")
    with col2:
        st.metric("Current Streak", overview.current_streak)
    with col3:
        st.metric("Total Reviews", f"{overview.total_reviews:,}")

    if overview.next_review_date is not None:
        st.caption(f"Next review: {overview.next_review_date:%Y-%m-%d %H:%M} UTC")

    st.markdown("### Word Mastery")
    table = cached_mastery_table(st.session_state.user_id)
    if table.empty:
        st.info("No reviews yet. Start a review session to track your progress.")
    else:
        st.dataframe(
            table,
            use_container_width=True,
            hide_index=True,
            column_config={
                "mastery": st.column_config.ProgressColumn("Mastery", min_value=0, max_value=100, format="%d%%"),
                "retention": st.column_config.ProgressColumn("Retention", min_value=0, max_value=100, format="%d%%"),
            },
        )
