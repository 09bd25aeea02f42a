"""
Review page rendering.
"""

from __future__ import annotations

import streamlit as st

from app.session_controller import (
    end_session,
    flip_card,
    get_controller,
    notify_failures,
    process_feedback,
    restart_session,
    start_new_session,
)
from app.ui import (
    render_card_back,
    render_card_front,
    render_feedback_buttons,
    render_session_complete,
    render_session_stats,
    render_word_details,
)
from core import srs
from core.analytics import build_user_overview
from core.review_session import SessionStatus


def render_review_page(user_options: dict[str, str]) -> None:
    """
    Render the review flow (intro, active card, or completion).
    """
    notify_failures()
    state = get_controller().state

    if render_session_stats(state):
        end_session()
        st.rerun()

    if state.status == SessionStatus.PRESENTING:
        _render_active_card()
    elif state.status == SessionStatus.COMPLETED:
        if render_session_complete(state):
            restart_session()
            st.rerun()
    else:
        _render_intro_screen(user_options, show_empty=state.is_empty)


def _render_intro_screen(user_options: dict[str, str], show_empty: bool) -> None:
    st.markdown("<style>.stApp h1 { font-size: 1.6rem; }</style>", unsafe_allow_html=True)
    st.title("📚 Vocabulary Review")
    if srs.is_test_mode():
        st.warning("⚠️ **TEST MODE** - Using test_learning_db (set TEST_MODE=false in .env for production)")

    user_labels = list(user_options.keys())
    if len(user_labels) > 1:
        selected_label = st.selectbox(
            "User",
            user_labels,
            index=user_labels.index(st.session_state.user_label)
            if st.session_state.user_label in user_labels
            else 0
        )
        st.session_state.user_label = selected_label
        st.session_state.user_id = user_options[selected_label]
    st.markdown(f"**Welcome {st.session_state.user_label}**")

    try:
        overview = build_user_overview(st.session_state.user_id)
    except Exception as exc:
        st.error(f"Could not load progress: {exc}")
        return

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Due Now", overview.due_count)
    with col2:
        st.metric("Learning", overview.learning_count)
    with col3:
        st.metric("Mastered", overview.mastered_count)

    if show_empty:
        st.info("🎉 No words available for review right now. Come back later!")

    st.markdown("<br>", unsafe_allow_html=True)
    if st.button("Start Review", type="primary", use_container_width=True):
        start_new_session()
        st.rerun()


def _render_active_card() -> None:
    state = get_controller().state
    item = state.current_item

    st.markdown("<br>", unsafe_allow_html=True)

    if not state.flipped:
        render_card_front(item)
        st.markdown("<br>", unsafe_allow_html=True)
        if st.button("Reveal Answer", use_container_width=True, type="primary"):
            flip_card()
            st.rerun()
        return

    render_card_back(item)
    st.markdown("<br>", unsafe_allow_html=True)

    quality = render_feedback_buttons(key_suffix=f"{item.word_id}_{state.current_index}")
    if quality is not None:
        process_feedback(quality)
        st.rerun()

    st.markdown("<br>", unsafe_allow_html=True)
    render_word_details(item)

    if srs.is_test_mode():
        st.caption("TEST MODE - Using test_learning_db")
