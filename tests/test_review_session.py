"""
Tests for the review session state machine and its controller.
"""

import random
import threading
from datetime import timedelta

import pytest

from core import srs
from core.review_session import (
    LEARNING,
    REMEMBERED,
    STRUGGLED,
    Flip,
    InvalidateDueItems,
    Rate,
    Restart,
    ReviewSessionController,
    SessionState,
    SessionStats,
    SessionStatus,
    Start,
    SubmitReview,
    classify_rating,
    transition,
)
from core.srs.progress import WordProgress


def make_pool(size):
    return [WordProgress(word_id=i, word={"word": f"word-{i}"}) for i in range(1, size + 1)]


def started(pool, rng, batch_cap=10):
    return transition(SessionState(), Start(pool, batch_cap), rng=rng).state


class RecordingSink:
    def __init__(self, events=None, fail_for=()):
        self.saved = []
        self.events = events if events is not None else []
        self.fail_for = set(fail_for)
        self._lock = threading.Lock()

    def submit_review(self, progress, quality, history_item):
        with self._lock:
            self.events.append(("write", progress.word_id))
            if progress.word_id in self.fail_for:
                raise RuntimeError("database unavailable")
            self.saved.append((progress, quality, history_item))


# ---- Rating buckets ----

@pytest.mark.parametrize("quality, bucket", [
    (0, STRUGGLED),
    (1, STRUGGLED),
    (2, LEARNING),
    (3, LEARNING),
    (4, REMEMBERED),
    (5, REMEMBERED),
])
def test_classify_rating(quality, bucket):
    assert classify_rating(quality) == bucket


def test_classify_rating_rejects_out_of_range():
    with pytest.raises(srs.InvalidRating):
        classify_rating(7)


def test_remembered_ratio():
    assert SessionStats().remembered_ratio == 0.0
    assert SessionStats(remembered=3, learning=1, struggled=0).remembered_ratio == 0.75


# ---- Transitions ----

def test_start_with_empty_pool_is_empty_not_completed(rng):
    result = transition(SessionState(), Start([]), rng=rng)

    assert result.state.status == SessionStatus.EMPTY
    assert result.state.is_empty
    assert not result.state.is_completed
    assert result.state.current_item is None
    assert result.state.stats == SessionStats()
    assert result.effects == ()


def test_start_with_zero_cap_is_empty(rng):
    state = started(make_pool(5), rng, batch_cap=0)

    assert state.status == SessionStatus.EMPTY


def test_start_samples_batch_with_given_rng():
    pool = make_pool(25)

    first = started(pool, random.Random(99))
    second = started(pool, random.Random(99))

    assert first.status == SessionStatus.PRESENTING
    assert len(first.batch) == 10
    assert first.batch == second.batch
    assert first.current_index == 0
    assert not first.flipped
    assert first.stats == SessionStats()


def test_small_pool_uses_every_item(rng):
    state = started(make_pool(3), rng)

    assert sorted(item.word_id for item in state.batch) == [1, 2, 3]


def test_flip_reveals_back_and_is_idempotent(rng):
    state = started(make_pool(3), rng)

    flipped = transition(state, Flip()).state
    again = transition(flipped, Flip())

    assert flipped.flipped
    assert again.state == flipped
    assert again.effects == ()


def test_rate_before_flip_is_ignored(rng, now):
    state = started(make_pool(3), rng)

    result = transition(state, Rate(5), now=now)

    assert result.state is state
    assert result.effects == ()


def test_rate_out_of_range_raises(rng, now):
    state = transition(started(make_pool(3), rng), Flip()).state

    with pytest.raises(srs.InvalidRating):
        transition(state, Rate(6), now=now)


def test_rate_advances_and_emits_review(rng, now):
    state = transition(started(make_pool(3), rng), Flip()).state
    item = state.current_item

    result = transition(state, Rate(4), now=now)

    assert result.state.current_index == 1
    assert not result.state.flipped
    assert result.state.stats == SessionStats(remembered=1)
    assert len(result.effects) == 1
    effect = result.effects[0]
    assert isinstance(effect, SubmitReview)
    assert effect.quality == 4
    assert effect.progress.word_id == item.word_id
    assert effect.progress.review_history[-1] == effect.history_item
    assert effect.progress.next_review_date == now + timedelta(days=1)
    # the batch keeps the pre-review snapshot
    assert state.batch[0].review_history == ()


def test_full_session_completes_with_every_rating(rng, now):
    state = started(make_pool(3), rng)
    submitted = []
    qualities = [5, 2, 0]

    for quality in qualities:
        state = transition(state, Flip()).state
        result = transition(state, Rate(quality), now=now)
        state = result.state
        submitted.extend(e for e in result.effects if isinstance(e, SubmitReview))

    assert state.status == SessionStatus.COMPLETED
    assert state.current_item is None
    assert state.stats == SessionStats(remembered=1, learning=1, struggled=1)
    assert state.stats.total == len(state.batch)
    assert [e.quality for e in submitted] == qualities
    assert isinstance(result.effects[-1], InvalidateDueItems)


def test_commands_after_completion_are_ignored(rng, now):
    state = transition(started(make_pool(1), rng), Flip()).state
    state = transition(state, Rate(5), now=now).state

    assert transition(state, Flip()).state is state
    assert transition(state, Rate(3), now=now).state is state
    assert transition(state, Rate(3), now=now).effects == ()


def test_restart_skips_words_rated_this_session(now):
    pool = make_pool(3)
    state = started(pool, random.Random(5), batch_cap=2)
    rated = {item.word_id for item in state.batch}
    while not state.is_completed:
        state = transition(state, Flip()).state
        state = transition(state, Rate(5), now=now).state

    restarted = transition(state, Restart(), rng=random.Random(5), now=now).state

    assert restarted.status == SessionStatus.PRESENTING
    assert restarted.stats == SessionStats()
    assert restarted.current_index == 0
    assert [item.word_id for item in restarted.batch] == [
        item.word_id for item in pool if item.word_id not in rated
    ]


def test_restart_offers_rated_words_with_updated_progress(rng, now):
    state = started(make_pool(2), rng)
    while not state.is_completed:
        state = transition(state, Flip()).state
        state = transition(state, Rate(5), now=now).state

    assert transition(state, Restart(), rng=rng, now=now).state.is_empty

    later = now + timedelta(days=2)
    restarted = transition(state, Restart(), rng=rng, now=later).state
    assert sorted(item.word_id for item in restarted.batch) == [1, 2]
    assert all(item.repetition_level == 1 for item in restarted.batch)
    assert all(len(item.review_history) == 1 for item in restarted.batch)

    flipped = transition(restarted, Flip()).state
    effect = transition(flipped, Rate(5), now=later).effects[0]
    assert effect.progress.repetition_level == 2
    assert len(effect.progress.review_history) == 2



def test_restart_with_fresh_pool(rng):
    state = started(make_pool(2), rng)

    restarted = transition(state, Restart([]), rng=rng).state

    assert restarted.status == SessionStatus.EMPTY


def test_view_reports_position(rng):
    state = started(make_pool(4), rng)

    view = state.view()

    assert view.current_item == state.batch[0]
    assert view.index == 0
    assert view.total == 4
    assert not view.flipped


# ---- Controller ----

def test_controller_persists_every_rating(rng, now):
    events = []
    sink = RecordingSink(events)
    controller = ReviewSessionController(
        sink,
        rng=rng,
        clock=lambda: now,
        on_invalidate=lambda: events.append(("invalidate", None)),
    )

    controller.start(make_pool(3))
    for quality in [5, 4, 1]:
        controller.flip()
        controller.rate(quality)
    controller.shutdown()

    assert controller.state.is_completed
    assert [quality for _, quality, _ in sink.saved] == [5, 4, 1]
    assert events[-1] == ("invalidate", None)
    assert len(events) == 4
    assert controller.drain_failures() == []


def test_controller_collects_write_failures(rng, now):
    pool = make_pool(2)
    sink = RecordingSink(fail_for={1})
    controller = ReviewSessionController(sink, rng=rng, clock=lambda: now)

    controller.start(pool)
    while not controller.state.is_completed:
        controller.flip()
        controller.rate(3)
    controller.flush()

    failures = controller.drain_failures()
    assert [failure.word_id for failure in failures] == [1]
    assert failures[0].quality == 3
    assert isinstance(failures[0].error, RuntimeError)
    assert [progress.word_id for progress, _, _ in sink.saved] == [2]
    # the session still finishes and counts the failed rating
    assert controller.state.stats.total == 2
    assert controller.drain_failures() == []
    controller.shutdown()


def test_controller_invalid_rating_leaves_state_unchanged(rng, now):
    controller = ReviewSessionController(RecordingSink(), rng=rng, clock=lambda: now)
    controller.start(make_pool(2))
    state = controller.flip()

    with pytest.raises(srs.InvalidRating):
        controller.rate(-1)

    assert controller.state is state
    controller.shutdown()


def test_controller_uses_batch_cap(rng, now):
    controller = ReviewSessionController(RecordingSink(), rng=rng, clock=lambda: now, batch_cap=4)

    state = controller.start(make_pool(12))

    assert len(state.batch) == 4
    controller.shutdown()


def test_invalidate_failure_is_not_raised(rng, now):
    def broken():
        raise RuntimeError("cache gone")

    controller = ReviewSessionController(RecordingSink(), rng=rng, clock=lambda: now, on_invalidate=broken)
    controller.start(make_pool(1))
    controller.flip()
    controller.rate(5)
    controller.shutdown()

    assert controller.state.is_completed


def test_controller_restart_keeps_review_history(rng, now):
    clock = [now]
    sink = RecordingSink()
    controller = ReviewSessionController(sink, rng=rng, clock=lambda: clock[0])

    controller.start([WordProgress(word_id=1)])
    controller.flip()
    controller.rate(5)

    assert controller.restart().is_empty

    clock[0] = now + timedelta(days=1)
    controller.restart()
    controller.flip()
    controller.rate(5)
    controller.shutdown()

    second, _, _ = sink.saved[-1]
    assert second.repetition_level == 2
    assert len(second.review_history) == 2
    assert second.review_history[0] == sink.saved[0][2]
