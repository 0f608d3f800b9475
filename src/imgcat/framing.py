"""Escape-sequence framing for the inline-image protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

OSC_INTRODUCER = b"\x1b]1337;File="
OSC_TERMINATOR = b"\a\n"

# tmux passes unknown sequences through only when wrapped in DCS tmux; ... ST,
# with every ESC inside the payload doubled.
TMUX_INTRODUCER = b"\x1bPtmux;\x1b\x1b]1337;File="
TMUX_TERMINATOR = b"\a\x1b\\\n"

ATTRIBUTE_SEPARATOR = b";"
PAYLOAD_SEPARATOR = b":"


@dataclass(frozen=True, slots=True)
class Framing:
    """Bytes written before and after the base64 body."""

    header: bytes
    footer: bytes


def build_framing(options: Iterable[str], *, multiplexer: bool) -> Framing:
    """Build the header and footer for the given attributes.

    Args:
        options: Ordered ``key=value`` attributes.
        multiplexer: Use the tmux passthrough variant.
    """
    introducer = TMUX_INTRODUCER if multiplexer else OSC_INTRODUCER
    terminator = TMUX_TERMINATOR if multiplexer else OSC_TERMINATOR
    attributes = ATTRIBUTE_SEPARATOR.join(option.encode("utf-8") for option in options)
    return Framing(header=introducer + attributes + PAYLOAD_SEPARATOR, footer=terminator)
