"""Debug logging to stderr.

Library modules log through ``logging.getLogger(__name__)`` and stay silent
unless ``setup_debug_logging`` attaches a handler.
"""

from __future__ import annotations

import logging

from imgcat.limits import MAX_LOG_MESSAGE_LENGTH

LOGGER_NAME = "imgcat"
_TRUNCATION_SUFFIX = "... [truncated]"


class TruncatingFormatter(logging.Formatter):
    """Formatter that caps oversized messages."""

    def format(self, record: logging.LogRecord) -> str:
        output = super().format(record)
        if len(output) > MAX_LOG_MESSAGE_LENGTH:
            output = output[:MAX_LOG_MESSAGE_LENGTH] + _TRUNCATION_SUFFIX
        return output


_debug_logging_initialized: bool = False


def setup_debug_logging(level: int = logging.DEBUG) -> None:
    """Send imgcat logs to stderr.

    This is idempotent - calling it multiple times has no effect after the first call.
    """
    global _debug_logging_initialized

    if _debug_logging_initialized:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(TruncatingFormatter("%(name)s: %(message)s"))

    logger = logging.getLogger(LOGGER_NAME)
    logger.addHandler(handler)
    logger.setLevel(level)

    _debug_logging_initialized = True

    logger.debug("Debug logging initialized")
