"""
Review session state machine.

A session walks the learner through a randomly sampled batch of due words:

    IDLE -> PRESENTING (front) -> PRESENTING (back) -> ... -> COMPLETED

`transition()` is pure: it takes the current SessionState and a command and
returns the next state plus the effects the caller should run (persisting a
review, invalidating cached due-word queries). `ReviewSessionController`
holds the state for one session and runs those effects in the background,
so a slow or failing write never blocks the learner.
"""

from __future__ import annotations

import logging
import random
import threading
from collections.abc import Sequence
from concurrent.futures import Executor, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional, Protocol, Union

from core.session_builders.pool_utils import sample_batch
from core.srs.constants import DEFAULT_BATCH_CAP, validate_quality
from core.srs.progress import ReviewHistoryItem, WordProgress, select_due_items
from core.srs.scheduler import apply_review

logger = logging.getLogger(__name__)


# ---- State ----

class SessionStatus(str, Enum):
    IDLE = "idle"
    EMPTY = "empty"            # No items available; not a completion
    PRESENTING = "presenting"
    COMPLETED = "completed"


REMEMBERED = "remembered"
LEARNING = "learning"
STRUGGLED = "struggled"


def classify_rating(quality: int) -> str:
    """
    Map a quality rating to its session statistics bucket.

    4-5 remembered, 2-3 learning, 0-1 struggled.
    """
    quality = validate_quality(quality)
    if quality >= 4:
        return REMEMBERED
    if quality >= 2:
        return LEARNING
    return STRUGGLED


@dataclass(frozen=True)
class SessionStats:
    remembered: int = 0
    learning: int = 0
    struggled: int = 0

    @property
    def total(self) -> int:
        return self.remembered + self.learning + self.struggled

    @property
    def remembered_ratio(self) -> float:
        if self.total == 0:
            return 0.0
        return self.remembered / self.total

    def record(self, quality: int) -> "SessionStats":
        bucket = classify_rating(quality)
        return replace(self, **{bucket: getattr(self, bucket) + 1})


@dataclass(frozen=True)
class CardView:
    """What the display needs to render one step."""
    current_item: Optional[WordProgress]
    flipped: bool
    index: int
    total: int


@dataclass(frozen=True)
class SessionState:
    """
    Snapshot of one review session. Replaced wholesale on every transition.
    """
    status: SessionStatus = SessionStatus.IDLE
    batch: tuple[WordProgress, ...] = ()
    current_index: int = 0
    flipped: bool = False
    selected_rating: Optional[int] = None
    stats: SessionStats = field(default_factory=SessionStats)
    candidate_pool: tuple[WordProgress, ...] = ()
    batch_cap: int = DEFAULT_BATCH_CAP

    @property
    def is_completed(self) -> bool:
        return self.status == SessionStatus.COMPLETED

    @property
    def is_empty(self) -> bool:
        return self.status == SessionStatus.EMPTY

    @property
    def current_item(self) -> Optional[WordProgress]:
        if self.status != SessionStatus.PRESENTING:
            return None
        if self.current_index >= len(self.batch):
            return None
        return self.batch[self.current_index]

    def view(self) -> CardView:
        return CardView(
            current_item=self.current_item,
            flipped=self.flipped,
            index=self.current_index,
            total=len(self.batch),
        )


# ---- Commands ----

@dataclass(frozen=True)
class Start:
    candidate_pool: Sequence[WordProgress]
    batch_cap: int = DEFAULT_BATCH_CAP


@dataclass(frozen=True)
class Flip:
    pass


@dataclass(frozen=True)
class Rate:
    quality: int


@dataclass(frozen=True)
class Restart:
    candidate_pool: Optional[Sequence[WordProgress]] = None  # None = reuse last pool


Command = Union[Start, Flip, Rate, Restart]


# ---- Effects ----

@dataclass(frozen=True)
class SubmitReview:
    progress: WordProgress  # updated state, history_item already appended
    quality: int
    history_item: ReviewHistoryItem


@dataclass(frozen=True)
class InvalidateDueItems:
    pass


Effect = Union[SubmitReview, InvalidateDueItems]


@dataclass(frozen=True)
class Transition:
    state: SessionState
    effects: tuple[Effect, ...] = ()


# ---- Transition Function ----

def _begin(
    pool: Sequence[WordProgress],
    batch_cap: int,
    rng: random.Random,
    due_at: Optional[datetime] = None
) -> SessionState:
    pool = tuple(pool)
    # Words rated earlier stay in the pool but are only offered again once due
    candidates = pool if due_at is None else select_due_items(pool, due_at)
    batch = tuple(sample_batch(candidates, batch_cap, rng))
    status = SessionStatus.PRESENTING if batch else SessionStatus.EMPTY
    return SessionState(status=status, batch=batch, candidate_pool=pool, batch_cap=batch_cap)


def _rate(state: SessionState, quality: int, now: datetime) -> Transition:
    quality = validate_quality(quality)
    item = state.current_item
    if item is None:
        logger.debug("Ignoring rating outside an active card (status=%s)", state.status.value)
        return Transition(state)
    if not state.flipped:
        logger.debug("Ignoring rating before the card was flipped (index=%d)", state.current_index)
        return Transition(state)

    stats = state.stats.record(quality)
    updated, history_item = apply_review(item, quality, now)
    effects: list[Effect] = [SubmitReview(updated, quality, history_item)]
    # Later restarts must see the rated state, not the pre-review snapshot
    pool = tuple(updated if p.word_id == updated.word_id else p for p in state.candidate_pool)

    if state.current_index >= len(state.batch) - 1:
        next_state = replace(
            state,
            status=SessionStatus.COMPLETED,
            flipped=False,
            selected_rating=None,
            stats=stats,
            candidate_pool=pool,
        )
        effects.append(InvalidateDueItems())
    else:
        next_state = replace(
            state,
            current_index=state.current_index + 1,
            flipped=False,
            selected_rating=None,
            stats=stats,
            candidate_pool=pool,
        )
    return Transition(next_state, tuple(effects))


def transition(
    state: SessionState,
    command: Command,
    *,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None
) -> Transition:
    """
    Apply one command to a session.

    Args:
        state: Current session state (never modified)
        command: Start, Flip, Rate or Restart
        rng: Random source for batch sampling
        now: Review time used when rating, and due cut-off on restart

    Returns:
        Transition with the next state and the effects to run

    Raises:
        InvalidRating: if a Rate command carries a quality outside 0-5
    """
    if isinstance(command, Start):
        return Transition(_begin(command.candidate_pool, command.batch_cap, rng or random.Random()))

    if isinstance(command, Restart):
        pool = state.candidate_pool if command.candidate_pool is None else command.candidate_pool
        due_at = now or datetime.now(timezone.utc)
        return Transition(_begin(pool, state.batch_cap, rng or random.Random(), due_at))

    if isinstance(command, Flip):
        if state.current_item is None:
            logger.debug("Ignoring flip outside an active card (status=%s)", state.status.value)
            return Transition(state)
        if state.flipped:
            return Transition(state)
        return Transition(replace(state, flipped=True))

    if isinstance(command, Rate):
        return _rate(state, command.quality, now or datetime.now(timezone.utc))

    raise TypeError(f"Unknown session command: {command!r}")


# ---- Controller ----

class ReviewSink(Protocol):
    """Persistence collaborator that stores one rating."""

    def submit_review(
        self,
        progress: WordProgress,
        quality: int,
        history_item: ReviewHistoryItem
    ) -> None:
        ...


@dataclass(frozen=True)
class PersistenceWriteFailure:
    """A rating that could not be saved. The item keeps its old schedule."""
    word_id: int
    quality: int
    error: BaseException


class ReviewSessionController:
    """
    Drives one review session and runs its effects.

    Writes are fire-and-forget on `executor` (a single worker by default, so
    writes land in rating order). Failed writes are not retried; they are
    collected for the caller via drain_failures().
    """

    def __init__(
        self,
        sink: ReviewSink,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
        executor: Optional[Executor] = None,
        on_invalidate: Optional[Callable[[], None]] = None,
        batch_cap: int = DEFAULT_BATCH_CAP,
    ):
        self.sink = sink
        self.rng = rng or random.Random()
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.on_invalidate = on_invalidate
        self.batch_cap = batch_cap
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="review-writes")
        self._state = SessionState(batch_cap=batch_cap)
        self._pending: list[Future] = []
        self._failures: list[PersistenceWriteFailure] = []
        self._lock = threading.Lock()

    @property
    def state(self) -> SessionState:
        return self._state

    def dispatch(self, command: Command) -> SessionState:
        result = transition(self._state, command, rng=self.rng, now=self.clock())
        if result.state.status != self._state.status:
            logger.debug("Session %s -> %s", self._state.status.value, result.state.status.value)
        self._state = result.state
        for effect in result.effects:
            self._run_effect(effect)
        return self._state

    def start(self, candidate_pool: Sequence[WordProgress]) -> SessionState:
        return self.dispatch(Start(candidate_pool, self.batch_cap))

    def flip(self) -> SessionState:
        return self.dispatch(Flip())

    def rate(self, quality: int) -> SessionState:
        return self.dispatch(Rate(quality))

    def restart(self, candidate_pool: Optional[Sequence[WordProgress]] = None) -> SessionState:
        return self.dispatch(Restart(candidate_pool))

    def drain_failures(self) -> list[PersistenceWriteFailure]:
        """Return and clear the write failures collected so far."""
        with self._lock:
            failures, self._failures = self._failures, []
        return failures

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until pending writes have finished."""
        with self._lock:
            pending, self._pending = self._pending, []
        wait(pending, timeout=timeout)

    def shutdown(self) -> None:
        self.flush()
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def _run_effect(self, effect: Effect) -> None:
        if isinstance(effect, SubmitReview):
            future = self._executor.submit(self._write, effect)
        elif isinstance(effect, InvalidateDueItems):
            if self.on_invalidate is None:
                return
            future = self._executor.submit(self._invalidate)
        else:
            raise TypeError(f"Unknown session effect: {effect!r}")
        with self._lock:
            self._pending = [f for f in self._pending if not f.done()]
            self._pending.append(future)

    def _write(self, effect: SubmitReview) -> None:
        try:
            self.sink.submit_review(effect.progress, effect.quality, effect.history_item)
        except Exception as exc:
            logger.warning("Review for word %s was not saved: %s", effect.progress.word_id, exc)
            with self._lock:
                self._failures.append(
                    PersistenceWriteFailure(effect.progress.word_id, effect.quality, exc)
                )

    def _invalidate(self) -> None:
        try:
            self.on_invalidate()
        except Exception as exc:
            logger.warning("Could not invalidate cached due words: %s", exc)
