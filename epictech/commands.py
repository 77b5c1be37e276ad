"""
Slash-command table.

Each command maps a token (e.g. "/joke") to a handler that takes the
remainder of the input line verbatim and returns reply text.  Lookup is
exact and case-sensitive; fuzzy matching belongs to the suggestion
index, not here.

The table is fixed at import time.  Add new commands to COMMANDS.
"""

import random
from collections.abc import Callable
from dataclasses import dataclass
from urllib.parse import quote

UNKNOWN_COMMAND_REPLY = "❓ Unknown command! Try /joke, /weather, /meme, /aiart, and more."


@dataclass(frozen=True, slots=True)
class CommandDescriptor:
    token: str
    description: str
    handler: Callable[[str], str]


# ------------------------------------------------------------------
# Handlers
# ------------------------------------------------------------------

def _meme(arg: str) -> str:
    caption = quote(arg or "epic_tech_chat", safe="")
    return f"![meme](https://api.memegen.link/images/custom/_/{caption}.png?background=none)"


def _roll(_: str) -> str:
    return f"You rolled a {random.randint(1, 6)}!"


def _flip(_: str) -> str:
    return "Heads 🍀" if random.random() > 0.5 else "Tails 🎲"


def _fixed(reply: str) -> Callable[[str], str]:
    return lambda _: reply


COMMANDS: tuple[CommandDescriptor, ...] = (
    CommandDescriptor("/joke", "Tell a nerdy joke",
                      _fixed("What's an AI's favorite genre? Algo-rhythm!")),
    CommandDescriptor("/meme", "Make a meme image from your caption", _meme),
    CommandDescriptor("/gif", "Find a trending GIF",
                      lambda arg: f'Here\'s a trending GIF for "{arg}" [Giphy integration preview]'),
    CommandDescriptor("/aiart", "Generate AI art from a prompt",
                      lambda arg: f'Here\'s your AI art for "{arg}" [AI art API integration preview]'),
    CommandDescriptor("/weather", "Weather for a location",
                      lambda arg: f"Weather for {arg or 'your location'}: 22°C, chance of bangers."),
    CommandDescriptor("/remind", "Set a reminder",
                      lambda arg: f"Reminder set for: {arg} [Real reminders coming soon!]"),
    CommandDescriptor("/tweet", "Post to X (preview)",
                      lambda arg: f'Pretend I just tweeted: "{arg}" (connect your X for real tweets!)'),
    CommandDescriptor("/roll", "Roll a six-sided die", _roll),
    CommandDescriptor("/flip", "Flip a coin", _flip),
    CommandDescriptor("/define", "Define a word",
                      lambda arg: f'Definition of "{arg}": [Dictionary API integration preview]'),
    CommandDescriptor("/vote", "Start a vote",
                      lambda arg: f'Vote started: "{arg}" (polling and buttons coming soon!)'),
    CommandDescriptor("/riddle", "Get a riddle",
                      _fixed("I have keys but can't open locks. What am I? (A piano!)")),
    CommandDescriptor("/quiz", "Quick quiz question",
                      _fixed("Quick quiz! What's the capital of Belgium? (Brussels)")),
    CommandDescriptor("/emoji-battle", "Pick a side in an emoji battle",
                      _fixed("🔥 vs 🤖 — which one wins? React below!")),
    CommandDescriptor("/streak", "Check your engagement streak",
                      _fixed("You're on an Epic Streak! 🔥 Show up every day for surprises.")),
    CommandDescriptor("/randomfact", "Random fun fact",
                      _fixed("Random fact: A group of flamingos is called a 'flamboyance.'")),
    CommandDescriptor("/roastme", "Get roasted",
                      _fixed("You're so extra, even Stack Overflow gave up!")),
    CommandDescriptor("/konami", "Secret code",
                      _fixed("🕹️ Secret code unlocked! (Up, up, down, down...)")),
    CommandDescriptor("/matrix", "Wake up, Neo",
                      _fixed("Wake up, Neo. You're in Epic Tech Chat now.")),
)

_BY_TOKEN = {c.token: c for c in COMMANDS}


def lookup(token: str, table: tuple[CommandDescriptor, ...] = COMMANDS) -> CommandDescriptor | None:
    """Exact, case-sensitive token lookup."""
    if table is COMMANDS:
        return _BY_TOKEN.get(token)
    return next((c for c in table if c.token == token), None)


def run_command(token: str, remainder: str, table: tuple[CommandDescriptor, ...] = COMMANDS) -> str:
    """Run *token* with *remainder*; unknown tokens get the fixed reply."""
    command = lookup(token, table)
    if command is None:
        return UNKNOWN_COMMAND_REPLY
    return command.handler(remainder.strip())
