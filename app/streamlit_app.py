"""
Vocabulary Review - Main App

Streamlit UI for the SM-2 spaced repetition reviewer.
"""

import logging
import os

import streamlit as st

from app.router import PAGES
from app.state import ensure_session_state, init_database


# ---- User Configuration ----

USER_OPTIONS = {
    "Demo": "demo",
    "Test": "test",
}


# ---- Logging ----

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


# ---- Page Setup ----

st.set_page_config(
    page_title="Vocabulary Review",
    page_icon="📚",
    layout="centered"
)

init_database()
ensure_session_state(USER_OPTIONS)


# ---- Main App ----

def main():
    """Main app entry point."""
    tabs = st.tabs([page.title for page in PAGES])
    for tab, page in zip(tabs, PAGES):
        with tab:
            page.render(USER_OPTIONS)


main()
