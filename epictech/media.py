"""
Floating media player: playlist state machine plus window position.

States:
  idle     no items, current is None
  loaded   items present, not playing
  playing  current item playing
  paused   current item paused (also where playback stops at the end)

Seeking, volume and dragging are plain writes; none of them change the
playback state.  Only the playlist operations and play/pause do.
"""

import math
import uuid
from dataclasses import dataclass, field
from enum import Enum

DEFAULT_VOLUME = 0.7
DEFAULT_POSITION = (100, 100)


class PlayerState(str, Enum):
    IDLE = "idle"
    LOADED = "loaded"
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass(frozen=True, slots=True)
class MediaItem:
    display_name: str
    source_handle: str
    kind: str  # "audio" | "video"
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "source_handle": self.source_handle,
            "kind": self.kind,
        }


def item_from_upload(name: str, source_handle: str, mime_type: str) -> MediaItem:
    kind = "video" if mime_type.startswith("video") else "audio"
    return MediaItem(display_name=name, source_handle=source_handle, kind=kind)


def format_time(seconds: float | None) -> str:
    """`m:ss`; missing or NaN durations render as 0:00."""
    if not seconds or math.isnan(seconds):
        return "0:00"
    mins = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{mins}:{secs:02d}"


class PlaylistController:
    """Owns the playlist, the current index and the player window state."""

    def __init__(self) -> None:
        self.items: list[MediaItem] = []
        self.current: int | None = None
        self.state = PlayerState.IDLE
        self.volume = DEFAULT_VOLUME
        self.progress = 0.0
        self.position: tuple[int, int] = DEFAULT_POSITION
        self.dragging = False
        self._drag_offset = (0, 0)

    @property
    def current_item(self) -> MediaItem | None:
        return None if self.current is None else self.items[self.current]

    # ---- Playlist ----

    def add(self, items: list[MediaItem]) -> None:
        if not items:
            return
        was_idle = not self.items
        self.items.extend(items)
        if was_idle:
            self.current = 0
            self.state = PlayerState.LOADED

    def remove(self, index: int) -> MediaItem:
        """Remove item *index*.  Raises IndexError when out of range."""
        if not 0 <= index < len(self.items):
            raise IndexError(index)
        removed = self.items.pop(index)

        if not self.items:
            self.current = None
            self.state = PlayerState.IDLE
            self.progress = 0.0
            return removed

        removed_current = index == self.current
        if index < self.current or (removed_current and self.current > 0):
            self.current -= 1
        if removed_current:
            self.progress = 0.0
        self.current = min(self.current, len(self.items) - 1)
        return removed

    def select(self, index: int) -> None:
        if not self.items:
            return
        self.current = max(0, min(index, len(self.items) - 1))
        self.progress = 0.0

    def next(self) -> None:
        if self.current is not None:
            self.select(self.current + 1)

    def previous(self) -> None:
        if self.current is not None:
            self.select(self.current - 1)

    # ---- Playback ----

    def play(self) -> None:
        if self.state is not PlayerState.IDLE:
            self.state = PlayerState.PLAYING

    def pause(self) -> None:
        if self.state is PlayerState.PLAYING:
            self.state = PlayerState.PAUSED

    def toggle(self) -> None:
        if self.state is PlayerState.PLAYING:
            self.pause()
        else:
            self.play()

    def on_ended(self) -> None:
        """Platform signalled the current item finished.  No looping."""
        if self.current is None:
            return
        if self.current < len(self.items) - 1:
            self.current += 1
            self.progress = 0.0
        else:
            self.state = PlayerState.PAUSED

    def seek(self, seconds: float) -> None:
        self.progress = max(0.0, seconds)

    def set_volume(self, volume: float) -> None:
        self.volume = max(0.0, min(1.0, volume))

    # ---- Window dragging ----

    def start_drag(self, x: int, y: int) -> None:
        self.dragging = True
        self._drag_offset = (x - self.position[0], y - self.position[1])

    def drag_to(self, x: int, y: int) -> None:
        if self.dragging:
            self.position = (x - self._drag_offset[0], y - self._drag_offset[1])

    def end_drag(self) -> None:
        self.dragging = False

    def as_dict(self) -> dict:
        return {
            "state": self.state.value,
            "current": self.current,
            "items": [i.as_dict() for i in self.items],
            "volume": self.volume,
            "progress": self.progress,
            "position": {"x": self.position[0], "y": self.position[1]},
            "dragging": self.dragging,
        }
