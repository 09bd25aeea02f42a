"""
Streamlit session state and database initialization helpers.
"""

from __future__ import annotations

import streamlit as st

from core import srs


def init_database() -> None:
    """
    Initialize database schema (cached per Streamlit session).
    """
    @st.cache_resource
    def _init_database() -> None:
        srs.init_db()

    _init_database()


def ensure_session_state(user_options: dict[str, str]) -> None:
    """
    Populate Streamlit session_state with defaults.
    """
    if "user_id" not in st.session_state:
        default_user_id = srs.get_default_user_id()
        st.session_state.user_id = default_user_id
        st.session_state.user_label = next(
            (label for label, uid in user_options.items() if uid == default_user_id),
            default_user_id.title()
        )
    if "review_controller" not in st.session_state:
        st.session_state.review_controller = None
    if "review_user_id" not in st.session_state:
        st.session_state.review_user_id = None
