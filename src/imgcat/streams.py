"""Uniform async access to sync and async byte streams."""

from __future__ import annotations

import inspect
from typing import Any, Protocol

from imgcat.errors import SinkWriteError, SourceReadError


class ByteSource(Protocol):
    """Anything with ``read(n)`` returning bytes, or an awaitable of bytes."""

    def read(self, size: int, /) -> Any: ...


class ByteSink(Protocol):
    """Anything with ``write(data)``; an optional ``drain()`` is awaited too."""

    def write(self, data: bytes, /) -> Any: ...


async def read_source(source: ByteSource, size: int) -> bytes:
    """Read up to ``size`` bytes. Returns ``b""`` at end of stream.

    Raises:
        SourceReadError: If the source fails.
    """
    try:
        result = source.read(size)
        if inspect.isawaitable(result):
            result = await result
        return bytes(result) if result else b""
    except Exception as exc:
        raise SourceReadError(f"Image source read failed: {exc}") from exc


async def write_sink(sink: ByteSink, data: bytes) -> None:
    """Write all of ``data`` to ``sink``.

    Raises:
        SinkWriteError: If the sink fails or reports a short write.
    """
    try:
        result = sink.write(data)
        if inspect.isawaitable(result):
            result = await result
        drain = getattr(sink, "drain", None)
        if drain is not None:
            await drain()
    except Exception as exc:
        raise SinkWriteError(f"Destination write failed: {exc}") from exc
    if isinstance(result, int) and result != len(data):
        raise SinkWriteError(f"Short write: {result} of {len(data)} bytes accepted")
