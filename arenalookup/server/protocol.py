"""
Line protocol shared by every input source.

A line is a command only if it starts with the prefix marker. Everything
else is ignored. Replies are CRLF terminated on the wire.
"""

import logging
from collections.abc import Hashable

from arenalookup.config import LINE_TERMINATOR
from arenalookup.services.command_interpreter import CommandInterpreter

logger = logging.getLogger(__name__)

INTERNAL_ERROR_REPLY = "FAILED: internal error"


def strip_line_ending(line: str) -> str:
    """Remove one trailing "\\n" and an optional "\\r" before it."""
    return line.removesuffix("\n").removesuffix("\r")


def terminate_reply(reply: str) -> str:
    """Append CRLF unless the reply is empty or already ends with it."""
    if not reply or reply.endswith(LINE_TERMINATOR):
        return reply
    return reply + LINE_TERMINATOR


async def dispatch_line(
    interpreter: CommandInterpreter,
    line: str,
    prefix: str,
    connection: Hashable,
) -> str | None:
    """
    Run one received line through the interpreter.

    Args:
        interpreter: Command interpreter
        line: Line without its line ending
        prefix: Marker that makes a line a command
        connection: Key identifying the client

    Returns:
        Wire-ready reply, or None if the line is not a command.
    """
    if not line.startswith(prefix):
        return None

    try:
        reply = await interpreter.handle(line[len(prefix) :], connection)
    except Exception:
        # A single bad line must never take the connection down
        logger.exception("Error handling command %r", line)
        reply = INTERNAL_ERROR_REPLY

    return terminate_reply(reply)
