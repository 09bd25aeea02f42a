"""
Simple page router for Streamlit tabs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from app.pages.review import render_review_page
from app.pages.progress import render_progress_page


@dataclass(frozen=True)
class AppPage:
    title: str
    render: Callable[[dict[str, str]], None]


PAGES = [
    AppPage(title="Review", render=render_review_page),
    AppPage(title="Progress", render=render_progress_page),
]
