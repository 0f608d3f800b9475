"""Streaming encoder for iTerm2 inline images."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

from imgcat.errors import PipeClosedError, UnsupportedEnvironmentError
from imgcat.framing import Framing, build_framing
from imgcat.limits import DEFAULT_CHUNK_SIZE
from imgcat.pipe import pipe
from imgcat.streams import write_sink
from imgcat.terminal import EnvironmentCapabilities
from imgcat.transcode import transcode

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from types import TracebackType

    from imgcat.pipe import PipeReader
    from imgcat.streams import ByteSink, ByteSource
    from imgcat.terminal import TerminalCapabilities

logger = logging.getLogger(__name__)


async def _compose(
    header: bytes,
    body: PipeReader,
    footer: bytes,
    chunk_size: int,
) -> AsyncIterator[bytes]:
    if header:
        yield header
    while chunk := await body.read(chunk_size):
        yield chunk
    if footer:
        yield footer


async def _drain(destination: ByteSink, chunks: AsyncIterator[bytes]) -> int:
    written = 0
    async for chunk in chunks:
        await write_sink(destination, chunk)
        written += len(chunk)
    return written


async def encode_stream(
    header: bytes,
    source: ByteSource,
    footer: bytes,
    destination: ByteSink,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> int:
    """Write ``header``, the base64 of ``source`` and ``footer`` to ``destination``.

    The body is produced by a transcode task running concurrently with the
    drain loop. The first failure on either side is raised; bytes already
    written stay written.

    Returns:
        Number of bytes written to ``destination``.

    Raises:
        SourceReadError: The source failed.
        SinkWriteError: The destination failed.
    """
    reader, writer = pipe()
    transcoder = asyncio.create_task(
        transcode(source, writer, chunk_size=chunk_size),
        name="imgcat-transcode",
    )
    try:
        async with contextlib.aclosing(_compose(header, reader, footer, chunk_size)) as chunks:
            return await _drain(destination, chunks)
    finally:
        # After a clean drain the transcoder has already closed the pipe.
        reader.close()
        if not transcoder.done():
            transcoder.cancel()
        await asyncio.wait([transcoder])


class Encoder:
    """Encodes images for display in iTerm2.

    Args:
        out: Destination byte stream, typically the terminal's stdout.
        *options: ``key=value`` attributes from ``imgcat.options``.
        capabilities: Terminal detection strategy. Defaults to the environment.
        chunk_size: Bytes read from the source per transcode step.

    Raises:
        UnsupportedEnvironmentError: The terminal is not iTerm2.
    """

    def __init__(
        self,
        out: ByteSink,
        *options: str,
        capabilities: TerminalCapabilities | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self._capabilities = capabilities or EnvironmentCapabilities()
        if not self._capabilities.supports_protocol():
            raise UnsupportedEnvironmentError("imgcat is only supported with iTerm2")
        self._out = out
        self._options = tuple(options)
        self._chunk_size = chunk_size

    @property
    def options(self) -> tuple[str, ...]:
        return self._options

    def framing(self) -> Framing:
        """Build header and footer for the current multiplexer state."""
        return build_framing(self._options, multiplexer=self._capabilities.is_multiplexer())

    async def encode(self, source: ByteSource) -> int:
        """Encode the image read from ``source`` into the output.

        Returns:
            Number of bytes written to the output.
        """
        framing = self.framing()
        logger.debug(
            "Encoding image with %d attribute(s), header=%d bytes",
            len(self._options),
            len(framing.header),
        )
        written = await encode_stream(
            framing.header,
            source,
            framing.footer,
            self._out,
            chunk_size=self._chunk_size,
        )
        logger.debug("Encoded image: %d bytes written", written)
        return written

    def writer(self) -> EncodeWriter:
        """Return a writer that encodes whatever is written to it.

        Must be called from a running event loop.
        """
        return EncodeWriter(self)


class EncodeWriter:
    """Incremental input for an ``Encoder``.

    Written chunks feed a background encode; ``close()`` finishes the input,
    waits for the encode to complete and raises its error, if any.
    """

    def __init__(self, encoder: Encoder) -> None:
        self._reader, self._writer = pipe()
        self._task = asyncio.create_task(self._run(encoder), name="imgcat-writer")

    async def _run(self, encoder: Encoder) -> int:
        try:
            return await encoder.encode(self._reader)
        except Exception as exc:
            logger.debug("Background encode failed: %s", exc)
            self._reader.close(exc)
            raise

    async def write(self, data: bytes | bytearray | memoryview) -> int:
        """Forward ``data`` to the encoder, waiting until it has been consumed."""
        return await self._writer.write(data)

    async def close(self) -> None:
        """Finish the input and wait for the whole pipeline to complete."""
        self._writer.close()
        await self._task

    async def __aenter__(self) -> EncodeWriter:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc is None:
            await self.close()
            return
        if not isinstance(exc, Exception):
            exc = PipeClosedError("Encode aborted")
        self._writer.close(exc)
        with contextlib.suppress(Exception):
            await self._task
