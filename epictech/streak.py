"""
Engagement streak.

The count goes up by one when a successful AI reply lands more than an
hour after the last qualifying one.  It never goes down: a missed day
simply stops the count from growing.
"""

import logging
import time
from dataclasses import dataclass

from epictech.config import STREAK_COOLDOWN, STREAK_STORAGE_KEY
from epictech.state_store import StateStore

log = logging.getLogger("epictech.streak")


@dataclass(frozen=True, slots=True)
class StreakState:
    count: int = 1
    last_qualifying: float = 0.0

    def as_dict(self) -> dict:
        return {"count": self.count, "last_qualifying": self.last_qualifying}

    @classmethod
    def from_dict(cls, data: dict | None) -> "StreakState":
        if not data:
            return cls()
        try:
            return cls(
                count=max(1, int(data.get("count", 1))),
                last_qualifying=float(data.get("last_qualifying", 0.0)),
            )
        except (TypeError, ValueError):
            return cls()


def update_streak(state: StreakState, now: float, cooldown: float = STREAK_COOLDOWN) -> StreakState:
    """Pure step function.  Returns `state` itself when inside the cooldown."""
    if now - state.last_qualifying > cooldown:
        return StreakState(count=state.count + 1, last_qualifying=now)
    return state


def streak_badge(count: int) -> str | None:
    if count >= 7:
        return f"🔥 EPIC STREAK {count}!"
    if count >= 3:
        return f"💥 Streak {count}"
    return None


class EngagementTracker:
    """Applies `update_streak` against an injected state store."""

    def __init__(self, store: StateStore, key: str = STREAK_STORAGE_KEY) -> None:
        self._store = store
        self._key = key

    @property
    def state(self) -> StreakState:
        return StreakState.from_dict(self._store.load(self._key))

    def record_qualifying_turn(self, now: float | None = None) -> StreakState:
        current = self.state
        updated = update_streak(current, time.time() if now is None else now)
        if updated is not current:
            self._store.save(self._key, updated.as_dict())
            log.info("Streak advanced to %d", updated.count)
        return updated
