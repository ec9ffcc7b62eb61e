"""
TCP front end.

Each client is served by its own task: read a line, dispatch it, write the
reply, repeat. Lines from one client are handled strictly in order.
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

from arenalookup.config import GREETING, MAX_LINE_BYTES
from arenalookup.server.protocol import dispatch_line, strip_line_ending, terminate_reply
from arenalookup.services.command_interpreter import CommandInterpreter

logger = logging.getLogger(__name__)

LINE_TOO_LONG_REPLY = "FAILED: line too long"


class LookupServer:
    """
    Newline-delimited TCP server in front of a CommandInterpreter.

    Args:
        interpreter: Shared command interpreter
        host: Interface to bind
        port: Port to bind, 0 for an ephemeral port
        prefix: Marker that makes a line a command
        max_line_bytes: Longest line buffered before it is dropped
    """

    def __init__(
        self,
        interpreter: CommandInterpreter,
        host: str = "0.0.0.0",
        port: int = 4000,
        prefix: str = "!",
        max_line_bytes: int = MAX_LINE_BYTES,
    ):
        self.interpreter = interpreter
        self.host = host
        self.port = port
        self.prefix = prefix
        self.max_line_bytes = max_line_bytes
        self._server: asyncio.Server | None = None

    async def start(self) -> asyncio.Server:
        """Bind and start accepting clients."""
        self._server = await asyncio.start_server(
            self.handle_client,
            self.host,
            self.port,
            limit=self.max_line_bytes,
        )
        # Resolve ephemeral ports
        self.port = self._server.sockets[0].getsockname()[1]
        logger.info("tcp server listening on %s:%d", self.host, self.port)
        return self._server

    async def serve_forever(self) -> None:
        if self._server is None:
            await self.start()
        assert self._server is not None
        async with self._server:
            await self._server.serve_forever()

    async def close(self) -> None:
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()
            self._server = None

    async def handle_client(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        """Serve one client until it disconnects."""
        peer = writer.get_extra_info("peername")
        logger.info("client connected: %s", peer)

        try:
            writer.write(terminate_reply(GREETING).encode("utf-8"))
            await writer.drain()

            async for line in self._read_lines(reader, writer):
                reply = await dispatch_line(self.interpreter, line, self.prefix, writer)
                if reply:
                    writer.write(reply.encode("utf-8"))
                    await writer.drain()
        except ConnectionError as e:
            logger.info("client %s connection lost: %s", peer, e)
        finally:
            self.interpreter.release(writer)
            writer.close()
            with contextlib.suppress(ConnectionError):
                await writer.wait_closed()
            logger.info("client disconnected: %s", peer)

    async def _read_lines(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> AsyncIterator[str]:
        """
        Yield complete lines, buffering partial reads.

        A final unterminated line is yielded at EOF. A line longer than the
        stream limit is discarded up to its terminator and the client is told.
        """
        discarding = False
        while True:
            try:
                data = await reader.readuntil(b"\n")
            except asyncio.IncompleteReadError as e:
                if e.partial and not discarding:
                    yield strip_line_ending(e.partial.decode("utf-8", errors="replace"))
                return
            except asyncio.LimitOverrunError as e:
                await reader.readexactly(e.consumed)
                if not discarding:
                    discarding = True
                    writer.write(terminate_reply(LINE_TOO_LONG_REPLY).encode("utf-8"))
                    await writer.drain()
                continue

            if discarding:
                # Tail of an over-long line
                discarding = False
                continue

            yield strip_line_ending(data.decode("utf-8", errors="replace"))
