"""Command autocomplete, recomputed on every keystroke."""

from epictech.commands import COMMANDS, CommandDescriptor
from epictech.config import COMMAND_MARKER, SUGGESTION_LIMIT


def suggest(
    prefix: str,
    table: tuple[CommandDescriptor, ...] = COMMANDS,
    limit: int = SUGGESTION_LIMIT,
) -> list[CommandDescriptor]:
    """
    Return up to `limit` commands matching what the user has typed so far.

    A command matches when its token starts with the lower-cased input, or
    when its description contains the input minus the command marker,
    ignoring case.
    Results keep table order; there is no relevance ranking.
    """
    if limit <= 0 or not prefix.startswith(COMMAND_MARKER):
        return []

    needle = prefix.lower()
    bare = needle[len(COMMAND_MARKER):]
    matches: list[CommandDescriptor] = []
    for command in table:
        if command.token.startswith(needle) or bare in command.description.lower():
            matches.append(command)
            if len(matches) >= limit:
                break
    return matches
