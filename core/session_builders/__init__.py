"""Session builder helpers for review batches."""

from core.session_builders.pool_utils import sample_batch

__all__ = [
    "sample_batch",
]
