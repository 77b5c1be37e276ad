"""
Daily quests.

Each local calendar day gets three quests drawn from QUESTS.  The draw
and the done flags are persisted under one key together with the date;
a stored set from another day, or one that doesn't parse, is discarded
and redrawn.
"""

import random
from collections.abc import Callable
from datetime import date

from epictech.config import QUEST_STORAGE_KEY, QUESTS_PER_DAY
from epictech.state_store import StateStore

QUESTS = [
    {"id": 1, "text": "Send a meme using /meme", "reward": "🎉"},
    {"id": 2, "text": "Win an emoji-battle", "reward": "🤖"},
    {"id": 3, "text": "Drop an image to the AI", "reward": "🖼️"},
    {"id": 4, "text": "Hit a 3-message streak!", "reward": "🔥"},
    {"id": 5, "text": "Try /joke or /quiz", "reward": "😹"},
]


class DailyQuests:
    def __init__(
        self,
        store: StateStore,
        key: str = QUEST_STORAGE_KEY,
        today: Callable[[], date] = date.today,
        rng: random.Random | None = None,
    ) -> None:
        self._store = store
        self._key = key
        self._today = today
        self._rng = rng or random.Random()

    def current(self) -> list[dict]:
        """Return today's quests, drawing a new set if needed."""
        today = self._today().isoformat()
        saved = self._store.load(self._key)
        if (
            isinstance(saved, dict)
            and saved.get("date") == today
            and isinstance(saved.get("quests"), list)
        ):
            return saved["quests"]

        drawn = self._rng.sample(QUESTS, QUESTS_PER_DAY)
        quests = [{**q, "done": False} for q in drawn]
        self._save(today, quests)
        return quests

    def complete(self, index: int) -> list[dict]:
        """Mark quest *index* done.  Raises IndexError for a bad index."""
        quests = self.current()
        if not 0 <= index < len(quests):
            raise IndexError(index)
        quests = [{**q, "done": True} if i == index else q for i, q in enumerate(quests)]
        self._save(self._today().isoformat(), quests)
        return quests

    def _save(self, today: str, quests: list[dict]) -> None:
        self._store.save(self._key, {"date": today, "quests": quests})
