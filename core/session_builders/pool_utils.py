"""
Pool utilities for session builders.

Minimal primitives for turning a candidate due pool into a session batch.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Optional, TypeVar

from core.srs.constants import DEFAULT_BATCH_CAP


T = TypeVar("T")


def sample_batch(
    pool: Sequence[T],
    batch_cap: int = DEFAULT_BATCH_CAP,
    rng: Optional[random.Random] = None
) -> list[T]:
    """
    Sample up to batch_cap items uniformly at random, without replacement.
    """
    if batch_cap <= 0 or not pool:
        return []
    rng = rng or random.Random()
    return rng.sample(list(pool), min(batch_cap, len(pool)))
