"""In-process rendezvous byte pipe.

``pipe()`` returns a connected reader/writer pair. A write waits until the
reader has consumed every written byte; there is no buffering beyond the
bytes of the write in progress. Either end can be closed with an error: the
reader sees the writer's error instead of end-of-stream, the writer sees the
reader's error instead of ``PipeClosedError``. The first close of an end wins.
A write cancelled after the reader took part of it closes the write end with
an error, so the reader never mistakes a truncated stream for a complete one.
"""

from __future__ import annotations

import asyncio
import contextlib

from imgcat.errors import PipeClosedError

_EMPTY = memoryview(b"")


class _Pipe:
    def __init__(self) -> None:
        self._pending = _EMPTY
        self._write_lock = asyncio.Lock()
        self._waiters: list[asyncio.Future[None]] = []
        self.reader_closed = False
        self.reader_error: BaseException | None = None
        self.writer_closed = False
        self.writer_error: BaseException | None = None

    async def _wait(self) -> None:
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(future)
        try:
            await future
        finally:
            with contextlib.suppress(ValueError):
                self._waiters.remove(future)

    def _wake(self) -> None:
        waiters, self._waiters = self._waiters, []
        for future in waiters:
            if not future.done():
                future.set_result(None)

    def _reader_failure(self) -> BaseException:
        return self.reader_error or PipeClosedError("Write on pipe with closed reader")

    async def write(self, data: bytes | bytearray | memoryview) -> int:
        view = memoryview(data).cast("B")
        async with self._write_lock:
            if self.writer_closed:
                raise PipeClosedError("Write on closed pipe")
            if self.reader_closed:
                raise self._reader_failure()
            if not view.nbytes:
                return 0
            self._pending = view
            self._wake()
            try:
                while self._pending.nbytes and not (self.reader_closed or self.writer_closed):
                    await self._wait()
            except asyncio.CancelledError:
                consumed = view.nbytes - self._pending.nbytes
                if 0 < consumed < view.nbytes:
                    # The reader holds a prefix of this write; end the stream with an error.
                    self.close_writer(
                        PipeClosedError(
                            f"Write cancelled after {consumed} of {view.nbytes} bytes"
                        )
                    )
                raise
            finally:
                written = view.nbytes - self._pending.nbytes
                self._pending = _EMPTY
            if written < view.nbytes:
                if self.reader_closed:
                    raise self._reader_failure()
                raise PipeClosedError("Write on closed pipe")
            return written

    async def read(self, size: int = -1) -> bytes:
        if size == 0:
            return b""
        while True:
            if self.reader_closed:
                raise PipeClosedError("Read on closed pipe")
            if self._pending.nbytes:
                available = self._pending.nbytes
                count = available if size < 0 else min(size, available)
                chunk = self._pending[:count].tobytes()
                self._pending = self._pending[count:]
                if not self._pending.nbytes:
                    self._wake()
                return chunk
            if self.writer_closed:
                if self.writer_error is not None:
                    raise self.writer_error
                return b""
            await self._wait()

    def close_reader(self, error: BaseException | None) -> None:
        if self.reader_closed:
            return
        self.reader_closed = True
        self.reader_error = error
        self._wake()

    def close_writer(self, error: BaseException | None) -> None:
        if self.writer_closed:
            return
        self.writer_closed = True
        self.writer_error = error
        self._wake()


class PipeReader:
    """Read end of a pipe."""

    def __init__(self, pipe: _Pipe) -> None:
        self._pipe = pipe

    async def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes, waiting for a writer if none are pending.

        Returns ``b""`` once the writer closed cleanly; raises the writer's
        error if it closed with one.
        """
        return await self._pipe.read(size)

    def close(self, error: BaseException | None = None) -> None:
        """Close the read end. Pending and future writes fail with ``error``."""
        self._pipe.close_reader(error)

    @property
    def closed(self) -> bool:
        return self._pipe.reader_closed


class PipeWriter:
    """Write end of a pipe."""

    def __init__(self, pipe: _Pipe) -> None:
        self._pipe = pipe

    async def write(self, data: bytes | bytearray | memoryview) -> int:
        """Hand ``data`` to the reader, waiting until all of it was read."""
        return await self._pipe.write(data)

    def close(self, error: BaseException | None = None) -> None:
        """Close the write end. The reader sees ``error`` or end-of-stream."""
        self._pipe.close_writer(error)

    @property
    def closed(self) -> bool:
        return self._pipe.writer_closed


def pipe() -> tuple[PipeReader, PipeWriter]:
    """Create a connected reader/writer pair."""
    shared = _Pipe()
    return PipeReader(shared), PipeWriter(shared)
