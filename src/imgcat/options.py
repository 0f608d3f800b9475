"""Display options for the inline-image protocol.

Each helper renders one ``key=value`` attribute understood by iTerm2's
``File=`` escape sequence. Lengths (used by ``width`` and ``height``) can be
given in character cells, pixels, a percentage of the session, or ``auto``.
"""

from __future__ import annotations

import base64
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

type Length = str

AUTO: Length = "auto"

_LENGTH_PATTERN = re.compile(r"^(?P<value>\d+)(?P<unit>px|%)?$", re.IGNORECASE)


def cells(count: int) -> Length:
    """Length in character cells."""
    return str(count)


def pixels(count: int) -> Length:
    """Length in pixels."""
    return f"{count}px"


def percent(count: int) -> Length:
    """Length relative to the session's width or height."""
    return f"{count}%"


def auto() -> Length:
    """Keep the image's inherent size."""
    return AUTO


def parse_length(text: str) -> Length:
    """Validate a textual length and return its canonical form.

    Accepts ``N``, ``Npx``, ``N%`` and ``auto``.

    Raises:
        ValueError: If ``text`` is not one of the accepted forms.
    """
    candidate = text.strip()
    if candidate.lower() == AUTO:
        return AUTO
    match = _LENGTH_PATTERN.match(candidate)
    if match is None:
        msg = f"Invalid length {text!r}: expected N, Npx, N% or auto"
        raise ValueError(msg)
    value = int(match.group("value"))
    unit = (match.group("unit") or "").lower()
    if unit == "px":
        return pixels(value)
    if unit == "%":
        return percent(value)
    return cells(value)


def _flag(value: bool) -> int:
    return 1 if value else 0


def name(text: str) -> str:
    """Filename shown by the terminal. Defaults to "Unnamed file" on its side."""
    encoded = base64.standard_b64encode(text.encode("utf-8")).decode("ascii")
    return f"name={encoded}"


def size(byte_count: int) -> str:
    """File size in bytes. Only used by the terminal's progress indicator."""
    return f"size={byte_count}"


def width(length: Length) -> str:
    return f"width={length}"


def height(length: Length) -> str:
    return f"height={length}"


def preserve_aspect_ratio(value: bool) -> str:
    """When false the image is stretched to fill width and height.

    The terminal defaults to true.
    """
    return f"preserveAspectRatio={_flag(value)}"


def inline(value: bool) -> str:
    """When true the image is displayed; otherwise it is downloaded.

    The terminal defaults to false.
    """
    return f"inline={_flag(value)}"


@dataclass(frozen=True, slots=True)
class DisplayOptions:
    """Ordered, immutable sequence of ``key=value`` attributes."""

    attributes: tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        *,
        name: str | None = None,
        size: int | None = None,
        width: Length | None = None,
        height: Length | None = None,
        preserve_aspect_ratio: bool | None = None,
        inline: bool | None = None,
    ) -> DisplayOptions:
        """Build options from keyword values, skipping the ones left as None."""
        attributes: list[str] = []
        if name is not None:
            attributes.append(_name(name))
        if size is not None:
            attributes.append(_size(size))
        if width is not None:
            attributes.append(_width(width))
        if height is not None:
            attributes.append(_height(height))
        if preserve_aspect_ratio is not None:
            attributes.append(_preserve_aspect_ratio(preserve_aspect_ratio))
        if inline is not None:
            attributes.append(_inline(inline))
        return cls(tuple(attributes))

    def __iter__(self) -> Iterator[str]:
        return iter(self.attributes)

    def __len__(self) -> int:
        return len(self.attributes)

    def attribute_map(self) -> dict[str, str]:
        """Map attribute keys to values. Later duplicates win."""
        mapping: dict[str, str] = {}
        for attribute in self.attributes:
            key, _, value = attribute.partition("=")
            mapping[key] = value
        return mapping


# Aliases so DisplayOptions.build can use the attribute names as parameters.
_name = name
_size = size
_width = width
_height = height
_preserve_aspect_ratio = preserve_aspect_ratio
_inline = inline


__all__ = [
    "AUTO",
    "DisplayOptions",
    "Length",
    "auto",
    "cells",
    "height",
    "inline",
    "name",
    "parse_length",
    "percent",
    "pixels",
    "preserve_aspect_ratio",
    "size",
    "width",
]
