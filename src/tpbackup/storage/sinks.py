from __future__ import annotations

import asyncio
import io
from pathlib import Path
from typing import BinaryIO

from tpbackup.core.interfaces import ISink, SinkFactory


class FileSink(ISink):
    """Append-only file sink; blocking writes run in a worker thread."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._fh: BinaryIO = open(path, "wb")

    @classmethod
    async def create(cls, path: Path) -> FileSink:
        """Open (truncate) `path` without blocking the event loop."""
        return await asyncio.to_thread(cls, path)

    async def write(self, data: bytes) -> None:
        await asyncio.to_thread(self._fh.write, data)

    async def aclose(self) -> None:
        await asyncio.to_thread(self._fh.close)


class SharedStreamSink(ISink):
    """One stream shared by every resource (e.g. stdout).

    Each `write` call is atomic with respect to other writers; documents from
    different resources may still follow each other in any order.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._lock = asyncio.Lock()

    async def write(self, data: bytes) -> None:
        async with self._lock:
            await asyncio.to_thread(self._stream.write, data)

    async def aclose(self) -> None:
        # the stream outlives every resource, only flush it
        async with self._lock:
            await asyncio.to_thread(self._stream.flush)


class BufferSink(ISink):
    """In-memory sink."""

    def __init__(self) -> None:
        self._buf = io.BytesIO()
        self.closed = False

    async def write(self, data: bytes) -> None:
        if self.closed:
            raise OSError("write to closed BufferSink")
        self._buf.write(data)

    async def aclose(self) -> None:
        self.closed = True

    def getvalue(self) -> bytes:
        return self._buf.getvalue()


# ---------------------------------------------------------------------------
# Sink factories
# ---------------------------------------------------------------------------


def file_sink_factory(out_dir: Path) -> SinkFactory:
    """One ``<resource>.json`` file per resource inside `out_dir`."""

    async def factory(resource: str) -> ISink:
        return await FileSink.create(out_dir / f"{resource}.json")

    return factory


def shared_sink_factory(sink: SharedStreamSink) -> SinkFactory:
    """Every resource writes to the same shared sink."""

    async def factory(resource: str) -> ISink:
        return sink

    return factory
