"""
Conversation log for Epic Tech Chat.

Session-only: turns live in process memory and vanish on restart (the
server analogue of a page reload).  The log is append-only; the only
removal is `clear()`, which drops everything at once.

The trailing window handed to the prompt assembler is a fresh list on
every call, never a stored copy.
"""

import time
import uuid
from dataclasses import dataclass, field

from epictech.config import CONTEXT_WINDOW

USER = "user"
BOT = "bot"

ORIGIN_AI = "ai"
ORIGIN_COMMAND = "command-table"
ORIGIN_ALT_BOT = "alternate-bot"


@dataclass(frozen=True, slots=True)
class Turn:
    role: str
    content: str
    origin: str
    failed: bool = False
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: float = field(default_factory=time.time)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "role": self.role,
            "content": self.content,
            "origin": self.origin,
            "failed": self.failed,
            "timestamp": self.timestamp,
        }


class ConversationStore:
    """Ordered, append-only list of turns."""

    def __init__(self) -> None:
        self._turns: list[Turn] = []
        self._ids: set[str] = set()

    def append(self, turn: Turn) -> Turn:
        if turn.id in self._ids:
            raise ValueError(f"Duplicate turn id: {turn.id}")
        self._turns.append(turn)
        self._ids.add(turn.id)
        return turn

    def extend(self, turns: list[Turn]) -> None:
        """Append several turns back to back (one exchange)."""
        for turn in turns:
            self.append(turn)

    def window(self, limit: int = CONTEXT_WINDOW) -> list[Turn]:
        """Return the last `limit` turns, oldest first."""
        if limit <= 0:
            return []
        return self._turns[-limit:]

    def turns(self) -> list[Turn]:
        return list(self._turns)

    def clear(self) -> None:
        self._turns.clear()
        self._ids.clear()

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self):
        return iter(list(self._turns))
