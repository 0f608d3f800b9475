"""Exception hierarchy for the inline-image encoder."""

from __future__ import annotations


class ImgcatError(RuntimeError):
    """Base class for every error raised by imgcat."""


class UnsupportedEnvironmentError(ImgcatError):
    """Raised when the terminal does not advertise inline-image support."""


class SourceReadError(ImgcatError):
    """Raised when the image source fails mid-read."""


class SinkWriteError(ImgcatError):
    """Raised when the destination fails or accepts fewer bytes than written."""


class PipeClosedError(ImgcatError):
    """Raised on a read or write against a closed pipe end."""
