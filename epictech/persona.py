"""
Persona preamble for the AI prompt.

The text comes from persona.txt beside this module.  A missing or empty
file is logged and replaced by DEFAULT_PERSONA, so the AI path keeps
answering with a bare-bones voice instead of failing every turn.
"""

import logging
from pathlib import Path

from epictech.config import PERSONA_FILE

log = logging.getLogger("epictech.persona")

DEFAULT_PERSONA = "You are Epic Tech AI: playful, inventive, and never boring."


class Persona:
    def __init__(self, filepath: Path = PERSONA_FILE) -> None:
        self._filepath = filepath
        self._text: str | None = None

    def load(self) -> str:
        """Return the preamble, reading the file only on first use."""
        if self._text is None:
            self._text = self._read()
        return self._text

    def _read(self) -> str:
        try:
            text = self._filepath.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            log.warning("Persona file %s missing; using the built-in persona.", self._filepath)
            return DEFAULT_PERSONA
        if not text:
            log.warning("Persona file %s is empty; using the built-in persona.", self._filepath)
            return DEFAULT_PERSONA
        return text
