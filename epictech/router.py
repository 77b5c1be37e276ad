"""
Responder routing for Epic Tech Chat.

Every turn is answered by exactly one responder:

  CommandInput   -> CommandTableResponder   (always)
  FreeformInput  -> the router's freeform responder, which is either
                    AIResponder or AlternateBotResponder depending on
                    the selected bot mode

Responders share one contract, `respond(turn_input) -> ReplyOutcome`.
Backend failures never escape `Router.route`: they come back as a
failed outcome carrying FALLBACK_REPLY.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from epictech.bridge import Bridge, BridgeError
from epictech.commands import COMMANDS, CommandDescriptor, run_command
from epictech.completion_client import BackendError, CompletionClient
from epictech.config import COMMAND_MARKER, CONTEXT_WINDOW, FALLBACK_REPLY, IMAGE_TOKEN
from epictech.conversation import (
    ORIGIN_AI,
    ORIGIN_ALT_BOT,
    ORIGIN_COMMAND,
    ConversationStore,
)
from epictech.persona import Persona
from epictech.prompt import assemble

log = logging.getLogger("epictech.router")


class BotMode(str, Enum):
    AI = "ai"
    ALTERNATE_BOT = "alternate-bot"


# ------------------------------------------------------------------
# Inputs and outcomes
# ------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ImageAttachment:
    payload: str       # data URL or other opaque blob, never decoded here
    mime_type: str

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image")


@dataclass(frozen=True, slots=True)
class CommandInput:
    token: str
    remainder: str = ""

    @property
    def display_text(self) -> str:
        return f"{self.token} {self.remainder}" if self.remainder else self.token


@dataclass(frozen=True, slots=True)
class FreeformInput:
    text: str
    image: ImageAttachment | None = None

    @property
    def image_attached(self) -> bool:
        return self.image is not None

    @property
    def display_text(self) -> str:
        if not self.image_attached:
            return self.text
        return f"{self.text} {IMAGE_TOKEN}" if self.text else IMAGE_TOKEN


TurnInput = CommandInput | FreeformInput


@dataclass(frozen=True, slots=True)
class ReplyOutcome:
    text: str
    origin: str
    failed: bool = False


def parse_input(text: str, image: ImageAttachment | None = None) -> TurnInput | None:
    """
    Classify raw user input.

    Text starting with the command marker becomes a CommandInput split at
    the first space; the remainder is kept verbatim.  Attachments that are
    not images are dropped.  Returns None when nothing is left to send.
    """
    if image is not None and not image.is_image:
        log.debug("Ignoring non-image attachment (%s)", image.mime_type)
        image = None

    if image is None and text.startswith(COMMAND_MARKER):
        token, _, remainder = text.partition(" ")
        return CommandInput(token=token, remainder=remainder)

    if not text.strip() and image is None:
        return None
    return FreeformInput(text=text, image=image)


# ------------------------------------------------------------------
# Collaborators
# ------------------------------------------------------------------

class StubVision:
    """Placeholder vision collaborator.  Receives the payload untouched."""

    def analyze(self, payload: str) -> None:
        log.info("Vision payload received (%d chars), analysis not implemented", len(payload))


# ------------------------------------------------------------------
# Responders
# ------------------------------------------------------------------

class CommandTableResponder:
    origin = ORIGIN_COMMAND

    def __init__(self, table: tuple[CommandDescriptor, ...] = COMMANDS) -> None:
        self._table = table

    def respond(self, turn_input: CommandInput) -> ReplyOutcome:
        return ReplyOutcome(run_command(turn_input.token, turn_input.remainder, self._table), self.origin)


class AIResponder:
    origin = ORIGIN_AI

    def __init__(
        self,
        client: CompletionClient,
        store: ConversationStore,
        persona: Persona,
        vision: StubVision | None = None,
        window_size: int = CONTEXT_WINDOW,
    ) -> None:
        self._client = client
        self._store = store
        self._persona = persona
        self._vision = vision or StubVision()
        self._window_size = window_size

    def build_prompt(self, turn_input: FreeformInput) -> str:
        return assemble(
            self._persona.load(),
            self._store.window(self._window_size),
            turn_input.image_attached,
            turn_input.display_text,
        )

    def respond(self, turn_input: FreeformInput) -> ReplyOutcome:
        if turn_input.image is not None:
            self._vision.analyze(turn_input.image.payload)
        prompt = self.build_prompt(turn_input)
        try:
            text = self._client.complete(prompt)
        except BackendError as e:
            log.error("AI backend failed: %s", e)
            return ReplyOutcome(FALLBACK_REPLY, self.origin, failed=True)
        return ReplyOutcome(text, self.origin)


class AlternateBotResponder:
    origin = ORIGIN_ALT_BOT

    def __init__(self, bridge: Bridge, target_channel: str | None = None) -> None:
        self._bridge = bridge
        self._target_channel = target_channel

    def respond(self, turn_input: FreeformInput) -> ReplyOutcome:
        try:
            self._bridge.send(turn_input.display_text, self._target_channel)
        except BridgeError as e:
            log.error("Bridge send failed: %s", e)
            return ReplyOutcome(FALLBACK_REPLY, self.origin, failed=True)
        return ReplyOutcome(self._bridge.acknowledgment(), self.origin)


FreeformResponder = AIResponder | AlternateBotResponder


# ------------------------------------------------------------------
# Router
# ------------------------------------------------------------------

class Router:
    """Holds one responder per input kind; picks exactly one per turn."""

    def __init__(
        self,
        ai: AIResponder,
        alternate: AlternateBotResponder,
        commands: CommandTableResponder | None = None,
        mode: BotMode = BotMode.AI,
    ) -> None:
        self._ai = ai
        self._alternate = alternate
        self._commands = commands or CommandTableResponder()
        self.freeform: FreeformResponder = ai
        self.set_mode(mode)

    @property
    def mode(self) -> BotMode:
        return BotMode.AI if self.freeform is self._ai else BotMode.ALTERNATE_BOT

    def set_mode(self, mode: BotMode) -> None:
        self.freeform = self._ai if BotMode(mode) is BotMode.AI else self._alternate

    def route(self, turn_input: TurnInput) -> ReplyOutcome:
        if isinstance(turn_input, CommandInput):
            responder = self._commands
        else:
            responder = self.freeform
        try:
            return responder.respond(turn_input)
        except Exception:
            log.exception("Responder %s crashed", type(responder).__name__)
            return ReplyOutcome(FALLBACK_REPLY, responder.origin, failed=True)
