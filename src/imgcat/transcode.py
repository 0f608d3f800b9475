"""Base64 transcoding stage.

Reads raw image bytes from a source and writes their base64 encoding into a
pipe. Runs as its own task; it is the only party that closes the pipe's write
end.
"""

from __future__ import annotations

import asyncio
import base64
import logging
from typing import TYPE_CHECKING

from imgcat.errors import PipeClosedError
from imgcat.limits import DEFAULT_CHUNK_SIZE
from imgcat.streams import read_source

if TYPE_CHECKING:
    from imgcat.pipe import PipeWriter
    from imgcat.streams import ByteSource

logger = logging.getLogger(__name__)

_GROUP = 3  # raw bytes per 4-character base64 group


async def transcode(
    source: ByteSource,
    sink: PipeWriter,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> None:
    """Copy ``source`` into ``sink`` as standard padded base64.

    Bytes that do not fill a whole group are carried into the next chunk, so
    the output equals the encoding of the whole input regardless of how the
    source splits its reads. The sink is closed exactly once: cleanly at end of
    input, or with the first read or write error.
    """
    carry = b""
    consumed = 0
    try:
        while chunk := await read_source(source, chunk_size):
            consumed += len(chunk)
            buffered = carry + chunk
            whole = len(buffered) - len(buffered) % _GROUP
            carry = buffered[whole:]
            if whole:
                await sink.write(base64.standard_b64encode(buffered[:whole]))
        if carry:
            await sink.write(base64.standard_b64encode(carry))
    except asyncio.CancelledError:
        sink.close(PipeClosedError("Transcode cancelled"))
        raise
    except Exception as exc:
        logger.debug("Transcode aborted after %d bytes: %s", consumed, exc)
        sink.close(exc)
    else:
        logger.debug("Transcode finished: %d bytes", consumed)
        sink.close()
