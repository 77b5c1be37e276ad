"""
Prompt construction for the AI path.

Layout (plain text, one completion prompt):
  persona
  [image marker]            <- empty line when no image
  Conversation history:
  role: content             <- one line per window turn
  User: <new message>
  Epic Tech AI:

The window is capped in turns, not tokens.  Long turns go through as-is.
"""

from collections.abc import Iterable

from epictech.config import ASSISTANT_NAME, IMAGE_MARKER
from epictech.conversation import Turn


def render_turn(turn: Turn) -> str:
    return f"{turn.role}: {turn.content}"


def assemble(
    persona: str,
    window: Iterable[Turn],
    image_attached: bool,
    user_text: str,
) -> str:
    """Build the completion prompt.  Deterministic for equal inputs."""
    lines = [
        persona,
        IMAGE_MARKER if image_attached else "",
        "Conversation history:",
    ]
    lines.extend(render_turn(t) for t in window)
    lines.append(f"User: {user_text}")
    lines.append(f"{ASSISTANT_NAME}:")
    return "\n".join(lines)
