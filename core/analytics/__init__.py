"""
Analytics package exports.
"""

from core.analytics.service import (
    build_mastery_table,
    build_review_overview,
    build_user_mastery_table,
    build_user_overview,
)
from core.analytics.types import ReviewOverview

__all__ = [
    "build_mastery_table",
    "build_review_overview",
    "build_user_mastery_table",
    "build_user_overview",
    "ReviewOverview",
]
