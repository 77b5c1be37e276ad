"""
Chat session orchestrator for Epic Tech Chat.

One ChatSession stands for one open page: it owns the conversation log,
the playlist and the router, and reads/writes the persisted streak and
quests through the injected state store.

Submission pipeline:
  1. Parse raw input (command / freeform / nothing).
  2. Route to exactly one responder (AI path reads the log tail first).
  3. Append the user turn, then the reply turn.
  4. Advance the streak on a successful AI reply.
  5. Hand the reply to the speaker, if one is present.

Only one submission may be in flight; a second one is rejected with
DispatchInProgress instead of being queued.
"""

import logging
import threading
from collections.abc import Iterable

from epictech.capabilities import CapabilityUnavailable, Speaker, Transcriber, speakable
from epictech.conversation import BOT, ORIGIN_AI, USER, ConversationStore, Turn
from epictech.media import PlaylistController
from epictech.quests import DailyQuests
from epictech.router import BotMode, ImageAttachment, Router, parse_input
from epictech.state_store import StateStore
from epictech.streak import EngagementTracker, StreakState

log = logging.getLogger("epictech.session")


class DispatchInProgress(Exception):
    """A previous submission has not settled yet."""


class ChatSession:
    def __init__(
        self,
        router: Router,
        store: ConversationStore,
        state: StateStore,
        speaker: Speaker | None = None,
        transcriber: Transcriber | None = None,
    ) -> None:
        self.router = router
        self.store = store
        self.tracker = EngagementTracker(state)
        self.quests = DailyQuests(state)
        self.media = PlaylistController()
        self.speaker = speaker
        self.transcriber = transcriber
        self.pending_input = ""
        self._dispatch_lock = threading.Lock()
        self._listening = False

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    @property
    def busy(self) -> bool:
        return self._dispatch_lock.locked()

    def submit(
        self,
        text: str,
        image: ImageAttachment | None = None,
        now: float | None = None,
    ) -> list[Turn]:
        """Run one exchange and return the turns it appended (possibly none)."""
        if not self._dispatch_lock.acquire(blocking=False):
            raise DispatchInProgress("A message is already being answered.")
        try:
            turn_input = parse_input(text, image)
            if turn_input is None:
                return []

            outcome = self.router.route(turn_input)

            user_turn = Turn(role=USER, content=turn_input.display_text, origin=outcome.origin)
            bot_turn = Turn(role=BOT, content=outcome.text, origin=outcome.origin, failed=outcome.failed)
            self.store.extend([user_turn, bot_turn])
            self.pending_input = ""

            if outcome.origin == ORIGIN_AI and not outcome.failed:
                self.tracker.record_qualifying_turn(now)

            if not outcome.failed:
                self.speak(outcome.text)
            return [user_turn, bot_turn]
        finally:
            self._dispatch_lock.release()

    def set_mode(self, mode: BotMode) -> None:
        self.router.set_mode(mode)
        log.info("Bot mode set to %s", self.router.mode.value)

    @property
    def streak(self) -> StreakState:
        return self.tracker.state

    # ------------------------------------------------------------------
    # Voice
    # ------------------------------------------------------------------

    def speak(self, text: str) -> None:
        text = speakable(text)
        if self.speaker is None or not text:
            return
        try:
            self.speaker.speak(text)
        except CapabilityUnavailable:
            log.debug("Speech synthesis unavailable")

    def listen(self) -> str | None:
        """
        Capture one utterance into `pending_input`.

        Returns the transcript, or None when speech input is unavailable or
        an utterance is already being captured.
        """
        if self.transcriber is None or self._listening:
            return None
        self._listening = True
        try:
            transcript = _join_partials(self.transcriber.transcribe())
        except CapabilityUnavailable:
            log.debug("Speech recognition unavailable")
            return None
        finally:
            self._listening = False
        self.pending_input = transcript
        return transcript

    def reset(self) -> None:
        """
        Drop the session-only state, as a page reload would.

        Refused while a submission is in flight, so its exchange can't land
        in the log after the reload.
        """
        if not self._dispatch_lock.acquire(blocking=False):
            raise DispatchInProgress("A message is still being answered.")
        try:
            self.store.clear()
            self.media = PlaylistController()
            self.pending_input = ""
        finally:
            self._dispatch_lock.release()


def _join_partials(partials: Iterable[str]) -> str:
    return "".join(partials)
