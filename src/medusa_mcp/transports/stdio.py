"""STDIO transport — newline-delimited JSON-RPC over stdin/stdout.

One process, one implicit session. Messages are handled strictly in
arrival order: each response is written and flushed before the next
line is read, so stdout never carries interleaved frames. Nothing but
protocol frames is written to stdout; diagnostics go to the logging
handlers on stderr.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import signal
import sys
from typing import IO, TYPE_CHECKING

from medusa_mcp.protocol.errors import ParseError
from medusa_mcp.protocol.jsonrpc import error_from_exception
from medusa_mcp.protocol.session import SessionStore

if TYPE_CHECKING:
    from medusa_mcp.protocol.dispatcher import RequestDispatcher, Response

logger = logging.getLogger(__name__)

MAX_MESSAGE_SIZE = 10 * 1024 * 1024


class StdioServer:
    """Reads requests from a stream reader and writes replies to a binary stream.

    Usage::

        server = StdioServer(dispatcher)
        await server.serve()          # until EOF or SIGINT/SIGTERM
    """

    def __init__(
        self,
        dispatcher: RequestDispatcher,
        *,
        reader: asyncio.StreamReader | None = None,
        output: IO[bytes] | None = None,
        sessions: SessionStore | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._reader = reader
        self._output = output
        self._sessions = sessions if sessions is not None else SessionStore()
        self._closing = asyncio.Event()

    def close(self) -> None:
        """Stop after the message currently being handled, if any."""
        if not self._closing.is_set():
            logger.info("Shutting down STDIO transport")
        self._closing.set()

    async def serve(self) -> None:
        reader = self._reader or await _connect_stdin()
        output = self._output or sys.stdout.buffer
        session = self._sessions.create()
        self._install_signal_handlers()
        logger.info("Serving MCP over STDIO")

        try:
            while not self._closing.is_set():
                try:
                    line = await self._next_line(reader)
                except ValueError as exc:
                    logger.error("Discarded oversized message: %s", exc)
                    error = ParseError("Parse error", "Message too large")
                    self._write(output, error_from_exception(None, error))
                    continue
                if line is None:
                    break
                if not line.strip():
                    continue
                response = await self._dispatcher.handle_raw(line, session)
                if response is not None:
                    self._write(output, response)
        finally:
            self._remove_signal_handlers()
            self._sessions.terminate(session.id)
        logger.info("STDIO transport closed")

    async def _next_line(self, reader: asyncio.StreamReader) -> bytes | None:
        """Read one line; ``None`` on EOF or shutdown."""
        read = asyncio.ensure_future(_read_frame(reader))
        closing = asyncio.ensure_future(self._closing.wait())
        try:
            done, _ = await asyncio.wait({read, closing}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            closing.cancel()
        if read not in done:
            read.cancel()
            return None
        return read.result() or None

    def _write(self, output: IO[bytes], response: Response) -> None:
        output.write(json.dumps(response).encode("utf-8") + b"\n")
        output.flush()

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError, RuntimeError, ValueError):
                loop.add_signal_handler(sig, self.close)

    def _remove_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError, RuntimeError, ValueError):
                loop.remove_signal_handler(sig)


async def _read_frame(reader: asyncio.StreamReader) -> bytes:
    """Read one newline-terminated frame; the unterminated tail (or b"") at EOF.

    A frame longer than the reader's limit is skipped up to and including
    its newline, however many chunks it arrives in, and reported once.

    Raises:
        ValueError: The frame exceeded the limit and was discarded.
    """
    try:
        return await reader.readuntil(b"\n")
    except asyncio.IncompleteReadError as exc:
        return exc.partial
    except asyncio.LimitOverrunError as exc:
        consumed = exc.consumed

    while True:
        await reader.readexactly(consumed)
        try:
            await reader.readuntil(b"\n")
            break
        except asyncio.IncompleteReadError:
            break
        except asyncio.LimitOverrunError as exc:
            consumed = exc.consumed
    msg = "message exceeds the stream limit"
    raise ValueError(msg)


async def _connect_stdin() -> asyncio.StreamReader:
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader(limit=MAX_MESSAGE_SIZE)
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin)
    return reader
