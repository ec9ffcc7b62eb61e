"""
Local console front end.

Reads command lines from the process's stdin and writes replies to stdout.
Blocking reads happen on a daemon thread so they never hold up the event
loop or process exit.
"""

import asyncio
import logging
import sys
import threading
from typing import TextIO

from arenalookup.server.protocol import dispatch_line, strip_line_ending
from arenalookup.services.command_interpreter import CommandInterpreter

logger = logging.getLogger(__name__)

CONSOLE_CONNECTION = "console"


def _pump_lines(
    stream: TextIO,
    loop: asyncio.AbstractEventLoop,
    queue: "asyncio.Queue[str | None]",
) -> None:
    try:
        for line in iter(stream.readline, ""):
            loop.call_soon_threadsafe(queue.put_nowait, line)
        loop.call_soon_threadsafe(queue.put_nowait, None)
    except RuntimeError:
        # Event loop already closed
        return


async def run_console(
    interpreter: CommandInterpreter,
    prefix: str = "!",
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> None:
    """
    Serve commands from a text stream until it reaches EOF.

    Args:
        interpreter: Shared command interpreter
        prefix: Marker that makes a line a command
        stdin: Input stream, defaults to sys.stdin
        stdout: Output stream, defaults to sys.stdout
    """
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout

    loop = asyncio.get_running_loop()
    queue: asyncio.Queue[str | None] = asyncio.Queue()
    threading.Thread(
        target=_pump_lines,
        args=(stdin, loop, queue),
        name="console-reader",
        daemon=True,
    ).start()

    logger.info("listening for input:")
    try:
        while (line := await queue.get()) is not None:
            reply = await dispatch_line(
                interpreter, strip_line_ending(line), prefix, CONSOLE_CONNECTION
            )
            if reply:
                stdout.write(reply)
                stdout.flush()
    finally:
        interpreter.release(CONSOLE_CONNECTION)

    logger.info("console input closed")
