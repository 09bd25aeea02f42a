"""
Session lifecycle helpers for Streamlit app.

Keeps one ReviewSessionController per browser session and adapts its
commands to Streamlit reruns.
"""

from __future__ import annotations

import logging

import streamlit as st

from core import srs
from core.analytics import build_user_mastery_table, build_user_overview
from core.review_session import ReviewSessionController, SessionState


logger = logging.getLogger(__name__)


@st.cache_data(show_spinner=False, ttl=300)
def cached_due_words(user_id: str, limit: int) -> list[srs.WordProgress]:
    return srs.fetch_due_word_progress(user_id, limit=limit)


@st.cache_data(show_spinner=False)
def cached_overview(user_id: str):
    return build_user_overview(user_id)


@st.cache_data(show_spinner=False)
def cached_mastery_table(user_id: str):
    return build_user_mastery_table(user_id)


def invalidate_review_caches() -> None:
    """Drop cached due-word and progress queries so the next read sees saved reviews."""
    cached_due_words.clear()
    cached_overview.clear()
    cached_mastery_table.clear()


def get_controller() -> ReviewSessionController:
    """
    Get the controller for the active user, creating it on first use.
    """
    controller = st.session_state.review_controller
    if controller is not None and st.session_state.review_user_id == st.session_state.user_id:
        return controller

    if controller is not None:
        controller.shutdown()

    controller = ReviewSessionController(
        sink=srs.WordProgressRepository(st.session_state.user_id),
        on_invalidate=invalidate_review_caches,
        batch_cap=srs.get_batch_cap(),
    )
    st.session_state.review_controller = controller
    st.session_state.review_user_id = st.session_state.user_id
    return controller


def _load_candidate_pool() -> list[srs.WordProgress]:
    return cached_due_words(st.session_state.user_id, srs.get_study_capacity())


def start_new_session() -> SessionState:
    controller = get_controller()
    try:
        pool = _load_candidate_pool()
    except Exception as exc:
        logger.exception("Could not load due words")
        st.error(f"Could not load due words: {exc}")
        return controller.state
    return controller.start(pool)


def restart_session() -> SessionState:
    """
    Start another batch from a fresh due-word query.
    """
    controller = get_controller()
    controller.flush()  # saved ratings must be visible to the new query
    invalidate_review_caches()
    try:
        pool = _load_candidate_pool()
    except Exception as exc:
        logger.exception("Could not load due words")
        st.error(f"Could not load due words: {exc}")
        return controller.state
    return controller.restart(pool)


def flip_card() -> SessionState:
    return get_controller().flip()


def process_feedback(quality: srs.Quality) -> SessionState:
    return get_controller().rate(quality)


def end_session() -> None:
    """
    Drop the current session once its pending writes have finished.
    """
    controller = st.session_state.review_controller
    if controller is not None:
        controller.shutdown()
        notify_failures()
        invalidate_review_caches()
    st.session_state.review_controller = None
    st.session_state.review_user_id = None


def notify_failures() -> None:
    """Show a toast for every rating that could not be saved."""
    controller = st.session_state.review_controller
    if controller is None:
        return
    for failure in controller.drain_failures():
        st.toast(f"⚠️ Review for word #{failure.word_id} was not saved", icon="⚠️")
