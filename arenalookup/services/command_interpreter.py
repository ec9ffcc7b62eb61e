"""
Command interpreter.

Turns one command line (prefix already removed) into a reply string.
Commands are a closed set; every command is handled in a single match and
anything else is reported back as unrecognized.

Input errors never raise: they become reply text. The only upstream failure
(`update`) is caught here and reported as a FAILED message.
"""

import logging
import re
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from enum import Enum
from typing import assert_never

from arenalookup.config import LINE_TERMINATOR
from arenalookup.models.card import Card, Dataset
from arenalookup.models.failure import KnownError
from arenalookup.models.session import Session, SessionScope
from arenalookup.services.card_formatter import (
    format_card_block,
    format_clear,
    format_match_list,
    format_set_index,
    format_set_listing,
)
from arenalookup.services.card_lookup import (
    get_setname_partial_matches,
    lookup_by_id,
    lookup_by_name,
)
from arenalookup.services.dataset_store import DatasetStore

logger = logging.getLogger(__name__)

Updater = Callable[[], Awaitable[object]]

_LEADING_INT = re.compile(r"^[+-]?[0-9]+")

_LONG_LISTING_FLAGS = frozenset({"l", "-l"})


class Command(str, Enum):
    """Every command the interpreter understands."""

    HELP = "help"
    UPDATE = "update"
    LS = "ls"
    CLEAR = "clear"
    SET = "set"
    SETS = "sets"
    ID = "id"
    NAME = "name"


@dataclass(frozen=True, slots=True)
class CommandHelp:
    command: Command
    description: str
    usage: str | None = None


COMMAND_HELP: tuple[CommandHelp, ...] = (
    CommandHelp(Command.HELP, "lists all commands"),
    CommandHelp(Command.UPDATE, "downloads the latest card data"),
    CommandHelp(
        Command.LS,
        "lists all cards in the current set. defaults to just their name. l includes descriptions.",
        "!ls l",
    ),
    CommandHelp(Command.CLEAR, "does a bunch of newlines to clear out the console"),
    CommandHelp(Command.SET, "sets the default set to search", "!set jmp"),
    CommandHelp(Command.SETS, "lists all set codes paired with full names", "!sets ahm"),
    CommandHelp(Command.ID, "finds a card by its arena id", "!id 215"),
    CommandHelp(Command.NAME, "finds cards by full or partial name", "!name Bolas"),
)

HELP_BORDER = "**********"


@dataclass(frozen=True, slots=True)
class ParsedCommand:
    """
    A command line split into command and arguments.

    Attributes:
        command: The command, or None if the first token is not a command
        args: Remaining tokens, lower-cased
        raw: The line as it was received
    """

    command: Command | None
    args: tuple[str, ...]
    raw: str


def parse_command(line: str) -> ParsedCommand:
    """Split a command line into a command and its arguments."""
    tokens = line.lower().split()
    if not tokens:
        return ParsedCommand(command=None, args=(), raw=line)

    try:
        command: Command | None = Command(tokens[0])
    except ValueError:
        command = None

    return ParsedCommand(command=command, args=tuple(tokens[1:]), raw=line)


def parse_card_id(token: str) -> int | None:
    """Parse the leading integer of a token, e.g. "215" or "215abc" -> 215."""
    match = _LEADING_INT.match(token)
    if match:
        return int(match.group(0))
    return None


def format_help() -> str:
    lines = [HELP_BORDER]
    for entry in COMMAND_HELP:
        line = f"{entry.command.value} - {entry.description}"
        if entry.usage:
            line += f" usage: {entry.usage}"
        lines.append(line)
    lines.append(HELP_BORDER)
    return LINE_TERMINATOR.join(lines)


class CommandInterpreter:
    """
    Executes commands against the shared Dataset.

    Args:
        store: Source of Dataset snapshots
        sessions: Decides which Session a connection uses
        updater: Refreshes and reloads the Dataset; `update` is refused without one
    """

    def __init__(
        self,
        store: DatasetStore,
        sessions: SessionScope,
        updater: Updater | None = None,
    ):
        self.store = store
        self.sessions = sessions
        self.updater = updater

    async def handle(self, line: str, connection: Hashable = None) -> str:
        """
        Execute one command line and return the reply.

        Args:
            line: Command text without the prefix marker
            connection: Key identifying the client, used to pick its Session

        Returns:
            Reply text, CRLF separated, without a trailing terminator.
        """
        parsed = parse_command(line)
        session = self.sessions.session_for(connection)
        # One snapshot per command so a concurrent reload cannot split a reply
        dataset = self.store.current()

        match parsed.command:
            case None:
                return f"unrecognized command: {parsed.raw}"
            case Command.HELP:
                return format_help()
            case Command.UPDATE:
                return await self._update()
            case Command.LS:
                return self._ls(dataset, session, parsed.args)
            case Command.CLEAR:
                return format_clear()
            case Command.SET:
                return self._set(dataset, session, parsed.args)
            case Command.SETS:
                return self._sets(dataset, parsed.args)
            case Command.ID:
                return self._id(dataset, session, parsed)
            case Command.NAME:
                return self._name(dataset, session, parsed.args)
            case _:
                assert_never(parsed.command)

    def release(self, connection: Hashable) -> None:
        """Forget per-connection state once a client goes away."""
        self.sessions.release(connection)

    async def _update(self) -> str:
        if self.updater is None:
            return "FAILED: update is not available"

        try:
            await self.updater()
        except KnownError as e:
            logger.warning("Update failed: %s", e.describe())
            return f"FAILED: update failed: {e.describe()}"

        return ""

    def _ls(self, dataset: Dataset, session: Session, args: tuple[str, ...]) -> str:
        entry = dataset.get(session.target_set)
        if entry is None:
            return f"FAILED: unrecognized set: {session.target_set}"

        long = bool(args) and args[0] in _LONG_LISTING_FLAGS
        return format_set_listing(entry, long=long)

    def _set(self, dataset: Dataset, session: Session, args: tuple[str, ...]) -> str:
        if not args:
            return f"set={session.target_set}"

        set_code = args[0].upper()
        entry = dataset.get(set_code)
        if entry is None:
            return f"FAILED: unrecognized set: {set_code}"

        session.target_set = set_code
        return f"SUCCESS: searching {entry.name}"

    def _sets(self, dataset: Dataset, args: tuple[str, ...]) -> str:
        if not args:
            return format_set_index(list(dataset.values()))

        query = " ".join(args)
        matches = get_setname_partial_matches(dataset, query)
        if not matches:
            return f"no matches found for {query}"
        return LINE_TERMINATOR.join(matches)

    def _id(self, dataset: Dataset, session: Session, parsed: ParsedCommand) -> str:
        if not parsed.args:
            return "enter the card id"

        arena_id = parse_card_id(parsed.args[0])
        if arena_id is None:
            return "id must be a number"

        card = lookup_by_id(dataset, session.target_set, arena_id)
        if card is None:
            return f"unable to find {parsed.raw}"
        return format_card_block(card)

    def _name(self, dataset: Dataset, session: Session, args: tuple[str, ...]) -> str:
        if not args:
            return "enter part of the card name"

        result: Card | list[Card] = lookup_by_name(dataset, session.target_set, " ".join(args))
        if isinstance(result, Card):
            return format_card_block(result)
        if not result:
            return "no matches found"
        return format_match_list(result)
