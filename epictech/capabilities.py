"""
Speech capabilities, injected from outside.

The core only needs two narrow shapes:
  - Transcriber.transcribe(): finite iterator of partial transcripts for
    one utterance.
  - Speaker.speak(text): fire-and-forget.

A missing capability (None) or one that raises CapabilityUnavailable
turns the action into a silent no-op.
"""

import re
from collections.abc import Iterator
from typing import Protocol

_MEME_IMAGE = re.compile(r"!\[meme\]\([^)]*\)")


class CapabilityUnavailable(Exception):
    """The platform cannot provide speech in this environment."""


class Transcriber(Protocol):
    def transcribe(self) -> Iterator[str]: ...


class Speaker(Protocol):
    def speak(self, text: str) -> None: ...


def speakable(text: str) -> str:
    """Strip meme image markdown so it isn't read aloud."""
    return _MEME_IMAGE.sub("", text).strip()
