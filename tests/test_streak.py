from datetime import date
import random

import pytest

from epictech.quests import QUESTS, DailyQuests
from epictech.state_store import MemoryStateStore, SqliteStateStore
from epictech.streak import EngagementTracker, StreakState, streak_badge, update_streak

HOUR = 60 * 60


def test_update_inside_cooldown_is_unchanged():
    state = StreakState(count=4, last_qualifying=1_000.0)
    assert update_streak(state, 1_000.0 + HOUR) is state


def test_update_after_cooldown_increments():
    state = StreakState(count=4, last_qualifying=1_000.0)
    assert update_streak(state, 1_001.0 + HOUR) == StreakState(count=5, last_qualifying=1_001.0 + HOUR)


@pytest.mark.parametrize("offset", [0.0, 1.0, HOUR / 2, HOUR])
def test_update_is_idempotent_within_cooldown(offset):
    state = StreakState(count=2, last_qualifying=50_000.0)
    now = 50_000.0 + offset
    assert update_streak(update_streak(state, now), now) == update_streak(state, now)


def test_update_after_gap_is_idempotent_for_same_now():
    state = StreakState(count=2, last_qualifying=0.0)
    once = update_streak(state, 99_999.0)
    assert update_streak(once, 99_999.0) == once


def test_missed_days_never_decrease():
    state = StreakState(count=9, last_qualifying=0.0)
    assert update_streak(state, 30 * 24 * HOUR).count == 10


def test_badges():
    assert streak_badge(1) is None
    assert streak_badge(3) == "💥 Streak 3"
    assert streak_badge(7) == "🔥 EPIC STREAK 7!"


def test_tracker_persists_through_port():
    store = MemoryStateStore()
    tracker = EngagementTracker(store)
    assert tracker.state == StreakState()
    tracker.record_qualifying_turn(now=5 * HOUR)
    assert EngagementTracker(store).state == StreakState(count=2, last_qualifying=5 * HOUR)


def test_tracker_ignores_corrupt_state():
    store = MemoryStateStore()
    store.save("epic-streak", {"count": "lots"})
    assert EngagementTracker(store).state == StreakState()


def test_sqlite_store_roundtrip(tmp_path):
    db = tmp_path / "state.db"
    store = SqliteStateStore(db)
    assert store.load("missing") is None
    store.save("k", {"count": 3})
    store.save("k", {"count": 4})
    store.close()
    assert SqliteStateStore(db).load("k") == {"count": 4}


# ---- daily quests ----

def _quests(store, day):
    return DailyQuests(store, today=lambda: day, rng=random.Random(7))


def test_quests_drawn_once_per_day():
    store = MemoryStateStore()
    first = _quests(store, date(2026, 3, 1)).current()
    assert len(first) == 3
    assert all(q["done"] is False for q in first)
    assert {q["id"] for q in first} <= {q["id"] for q in QUESTS}
    assert _quests(store, date(2026, 3, 1)).current() == first


def test_quest_completion_persists_for_the_day():
    store = MemoryStateStore()
    book = _quests(store, date(2026, 3, 1))
    book.current()
    book.complete(1)
    again = _quests(store, date(2026, 3, 1)).current()
    assert [q["done"] for q in again] == [False, True, False]


def test_new_day_redraws():
    store = MemoryStateStore()
    book = _quests(store, date(2026, 3, 1))
    book.complete(0)
    fresh = _quests(store, date(2026, 3, 2)).current()
    assert all(q["done"] is False for q in fresh)
    assert store.load("epic-daily-quests")["date"] == "2026-03-02"


def test_complete_bad_index():
    with pytest.raises(IndexError):
        _quests(MemoryStateStore(), date(2026, 3, 1)).complete(3)


@pytest.mark.parametrize(
    "saved",
    [
        {"date": "2026-03-01"},
        {"date": "2026-03-01", "quests": "all of them"},
        ["not", "a", "dict"],
    ],
)
def test_malformed_saved_quests_are_redrawn(saved):
    store = MemoryStateStore()
    store.save("epic-daily-quests", saved)
    quests = _quests(store, date(2026, 3, 1)).current()
    assert len(quests) == 3
    assert store.load("epic-daily-quests")["quests"] == quests
