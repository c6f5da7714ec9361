"""Turn one raw input line into a command variant.

Rules are tried in order and the first match wins. Matching is exact and
case-sensitive; the line is not trimmed.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Command:
    pass


@dataclass(frozen=True)
class Clear(Command):
    pass


@dataclass(frozen=True)
class OpenSettings(Command):
    pass


@dataclass(frozen=True)
class Help(Command):
    pass


@dataclass(frozen=True)
class Search(Command):
    query: str


@dataclass(frozen=True)
class Exit(Command):
    pass


@dataclass(frozen=True)
class Nsfw(Command):
    enabled: bool


@dataclass(frozen=True)
class History(Command):
    pass


@dataclass(frozen=True)
class LoadSession(Command):
    pass


@dataclass(frozen=True)
class PickPrompt(Command):
    pass


@dataclass(frozen=True)
class LoadPrompt(Command):
    name: str


@dataclass(frozen=True)
class SavePrompt(Command):
    name: str


@dataclass(frozen=True)
class Chat(Command):
    text: str


@dataclass(frozen=True)
class Invalid(Command):
    reason: str


INVALID_COMMAND = "Invalid command. Type 'help' for a list of available commands."
INVALID_NSFW = "Invalid NSFW command. Use 'nsfw:on' or 'nsfw:off'."

SEARCH_PREFIX = "search:"
NSFW_PREFIX = "nsfw:"
PROMPT_LOAD_PREFIX = "prompt:load:"
PROMPT_SAVE_PREFIX = "prompt:save:"

_EXACT = {
    "history": History,
    "load": LoadSession,
    "prompts": PickPrompt,
}


def parse_command(line: str) -> Command:
    if line == "clear":
        return Clear()
    if line == "settings":
        return OpenSettings()
    if line == "help":
        return Help()
    if line.startswith(SEARCH_PREFIX):
        return Search(line[len(SEARCH_PREFIX):])
    if line == "exit":
        return Exit()
    if line.startswith(NSFW_PREFIX):
        mode = line[len(NSFW_PREFIX):]
        if mode == "on":
            return Nsfw(True)
        if mode == "off":
            return Nsfw(False)
        return Invalid(INVALID_NSFW)

    if line in _EXACT:
        return _EXACT[line]()
    if line.startswith(PROMPT_LOAD_PREFIX):
        name = line[len(PROMPT_LOAD_PREFIX):]
        return LoadPrompt(name) if name else Invalid("Usage: prompt:load:<name>")
    if line.startswith(PROMPT_SAVE_PREFIX):
        name = line[len(PROMPT_SAVE_PREFIX):]
        return SavePrompt(name) if name else Invalid("Usage: prompt:save:<name>")

    if line:
        return Chat(line)
    return Invalid(INVALID_COMMAND)
