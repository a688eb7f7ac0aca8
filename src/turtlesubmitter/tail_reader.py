"""Follow-mode reading of a log file that is still being written.

The reader never reports end of file: when it catches up with the writer it
sleeps briefly and tries again, so callers see an unbounded stream of lines.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiofiles

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.01
DEFAULT_CHUNK_SIZE = 64 * 1024


class TailReader:
    """Unbounded async stream over an append-only file.

    Attributes:
        poll_interval: Seconds to wait at end of file before retrying.
        chunk_size: Maximum bytes requested per read.
    """

    def __init__(
        self,
        file,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        """Wrap an already opened aiofiles binary file object.

        Args:
            file: aiofiles file opened in binary mode.
            poll_interval: Seconds to wait at end of file before retrying.
            chunk_size: Maximum bytes requested per read.
        """
        self._file = file
        self._buffer = bytearray()
        self.poll_interval = poll_interval
        self.chunk_size = chunk_size

    async def read(self, size: int | None = None) -> bytes:
        """Read the next available bytes, waiting for the writer if needed.

        Never returns an empty result. Errors other than end of file
        propagate to the caller.
        """
        size = size or self.chunk_size
        while True:
            chunk = await self._file.read(size)
            if chunk:
                return chunk
            await asyncio.sleep(self.poll_interval)

    async def readline(self) -> str:
        """Return the next complete line without its line terminator.

        A trailing line that has no newline yet is held back until the
        writer finishes it.
        """
        while True:
            newline = self._buffer.find(b"\n")
            if newline >= 0:
                raw = bytes(self._buffer[:newline])
                del self._buffer[: newline + 1]
                return raw.rstrip(b"\r").decode("utf-8", errors="replace")
            self._buffer.extend(await self.read())

    async def lines(self) -> AsyncIterator[str]:
        while True:
            yield await self.readline()


@asynccontextmanager
async def tail_file(
    path: str | Path,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> AsyncIterator[TailReader]:
    """Open a file for follow-mode reading from its beginning.

    The file handle is released when the context exits, including on
    cancellation.

    Raises:
        OSError: If the file cannot be opened
    """
    log_path = Path(path)
    f = await aiofiles.open(log_path, "rb")
    logger.debug(f"Tailing {log_path}")
    try:
        yield TailReader(f, poll_interval=poll_interval, chunk_size=chunk_size)
    finally:
        await f.close()
        logger.debug(f"Closed tail of {log_path}")
