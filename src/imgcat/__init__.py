"""imgcat: stream images to iTerm2 using its inline-image escape sequence."""

from imgcat.encoder import EncodeWriter, Encoder, encode_stream
from imgcat.errors import (
    ImgcatError,
    PipeClosedError,
    SinkWriteError,
    SourceReadError,
    UnsupportedEnvironmentError,
)
from imgcat.framing import Framing, build_framing
from imgcat.options import DisplayOptions
from imgcat.terminal import (
    EnvironmentCapabilities,
    StaticCapabilities,
    TerminalCapabilities,
    is_supported,
    is_tmux,
)

__version__ = "0.1.0"

__all__ = [
    "DisplayOptions",
    "EncodeWriter",
    "Encoder",
    "EnvironmentCapabilities",
    "Framing",
    "ImgcatError",
    "PipeClosedError",
    "SinkWriteError",
    "SourceReadError",
    "StaticCapabilities",
    "TerminalCapabilities",
    "UnsupportedEnvironmentError",
    "build_framing",
    "encode_stream",
    "is_supported",
    "is_tmux",
]
