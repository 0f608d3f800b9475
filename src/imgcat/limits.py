"""Buffer sizes and logging limits - no circular dependencies."""

from __future__ import annotations

DEFAULT_CHUNK_SIZE = 32 * 1024
"""Bytes read from the image source per transcode step."""

STDIN_READ_SIZE = 64 * 1024

MAX_LOG_MESSAGE_LENGTH = 4096
