"""MCP server transports: line-delimited JSON-RPC over stdin/stdout.

Each transport satisfies the :class:`ServerTransport` protocol, providing
``connect``, ``receive_line``, ``send`` and ``close``.
"""

from __future__ import annotations

import asyncio
import io
import json
import sys
from typing import IO, Any, Protocol, runtime_checkable

# Large tool arguments are legal; the asyncio default of 64 KiB is not enough.
STREAM_LIMIT = 16 * 1024 * 1024
FILE_CHUNK = 64 * 1024


class OversizedLineError(ValueError):
    """A line exceeded the reader limit. It has been discarded in full."""


@runtime_checkable
class ServerTransport(Protocol):
    """Abstract server-side transport for MCP JSON-RPC communication."""

    async def connect(self) -> None: ...
    async def receive_line(self) -> str | None: ...
    async def send(self, data: dict[str, Any]) -> None: ...
    async def close(self) -> None: ...


class StdioServerTransport:
    """Reads requests from stdin and writes responses to stdout.

    One JSON document per line in both directions. ``reader`` and
    ``output`` may be injected; by default the process streams are used.
    Redirected regular files are read on a worker thread, since asyncio
    pipe transports only accept pipes and sockets.
    """

    def __init__(
        self,
        reader: asyncio.StreamReader | None = None,
        output: IO[str] | None = None,
    ) -> None:
        self._reader = reader
        self._output = output
        self._feeder: asyncio.Task[None] | None = None
        self._closed = False

    async def connect(self) -> None:
        """Attach an asyncio reader to the process stdin."""
        if self._reader is None:
            loop = asyncio.get_running_loop()
            reader = asyncio.StreamReader(limit=STREAM_LIMIT)
            protocol = asyncio.StreamReaderProtocol(reader)
            try:
                await loop.connect_read_pipe(lambda: protocol, sys.stdin)
            except ValueError:
                self._feeder = asyncio.create_task(_feed_from_file(reader, sys.stdin.buffer))
            self._reader = reader
        if self._output is None:
            self._output = sys.stdout

    async def receive_line(self) -> str | None:
        """Return the next line without its terminator, or ``None`` at EOF.

        Raises
        ------
        OversizedLineError
            If the line is longer than the reader limit. The rest of that
            line is consumed, so the next call starts on a fresh line.
        """
        if self._reader is None:
            msg = "Transport not connected"
            raise RuntimeError(msg)
        if self._closed:
            return None
        try:
            raw = await self._reader.readuntil(b"\n")
        except asyncio.IncompleteReadError as exc:
            raw = exc.partial
            if not raw:
                return None
        except asyncio.LimitOverrunError as exc:
            await _discard_line(self._reader, exc.consumed)
            msg = "Message exceeds the maximum line length"
            raise OversizedLineError(msg) from None
        return raw.decode("utf-8", errors="replace").rstrip("\r\n")

    async def send(self, data: dict[str, Any]) -> None:
        """Write a JSON line to the output stream."""
        if self._output is None:
            msg = "Transport not connected"
            raise RuntimeError(msg)
        if self._closed:
            msg = "Transport closed"
            raise RuntimeError(msg)
        self._output.write(json.dumps(data, ensure_ascii=False) + "\n")
        self._output.flush()

    async def close(self) -> None:
        self._closed = True
        if self._feeder is not None:
            self._feeder.cancel()
            self._feeder = None


async def _discard_line(reader: asyncio.StreamReader, consumed: int) -> None:
    """Drop buffered bytes until just past the next newline (or EOF)."""
    while True:
        try:
            await reader.readexactly(consumed)
            await reader.readuntil(b"\n")
            return
        except asyncio.LimitOverrunError as exc:
            consumed = exc.consumed
        except asyncio.IncompleteReadError:
            return


async def _feed_from_file(reader: asyncio.StreamReader, stream: io.BufferedIOBase) -> None:
    while chunk := await asyncio.to_thread(stream.read1, FILE_CHUNK):
        reader.feed_data(chunk)
    reader.feed_eof()
