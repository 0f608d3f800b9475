"""Tests for header/footer framing."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from imgcat.framing import (
    OSC_INTRODUCER,
    OSC_TERMINATOR,
    TMUX_INTRODUCER,
    TMUX_TERMINATOR,
    build_framing,
)
from tests.strategies import attribute_lists

pytestmark = pytest.mark.unit


def test_plain_framing_bytes() -> None:
    framing = build_framing(["width=80", "height=24", "inline=1"], multiplexer=False)

    assert framing.header == b"\x1b]1337;File=width=80;height=24;inline=1:"
    assert framing.footer == b"\x07\n"


def test_tmux_framing_bytes() -> None:
    framing = build_framing(["inline=1"], multiplexer=True)

    assert framing.header == b"\x1bPtmux;\x1b\x1b]1337;File=inline=1:"
    assert framing.footer == b"\x07\x1b\\\n"


def test_no_attributes_still_terminates_header() -> None:
    framing = build_framing([], multiplexer=False)
    assert framing.header == b"\x1b]1337;File=:"


class TestFramingProperties:
    @given(attribute_lists, st.booleans())
    def test_header_starts_with_introducer_and_ends_with_one_colon(
        self, attributes: list[str], multiplexer: bool
    ) -> None:
        framing = build_framing(attributes, multiplexer=multiplexer)
        introducer = TMUX_INTRODUCER if multiplexer else OSC_INTRODUCER

        assert framing.header.startswith(introducer)
        assert framing.header.endswith(b":")
        assert framing.header.count(b":") == 1

    @given(attribute_lists, st.booleans())
    def test_attributes_are_joined_in_order(self, attributes: list[str], multiplexer: bool) -> None:
        framing = build_framing(attributes, multiplexer=multiplexer)
        introducer = TMUX_INTRODUCER if multiplexer else OSC_INTRODUCER

        joined = framing.header[len(introducer) : -1]
        assert joined == ";".join(attributes).encode("utf-8")

    @given(attribute_lists)
    def test_modes_differ_only_in_introducer_and_terminator(self, attributes: list[str]) -> None:
        plain = build_framing(attributes, multiplexer=False)
        tmux = build_framing(attributes, multiplexer=True)

        assert plain.header.removeprefix(OSC_INTRODUCER) == tmux.header.removeprefix(
            TMUX_INTRODUCER
        )
        assert plain.footer == OSC_TERMINATOR
        assert tmux.footer == TMUX_TERMINATOR

    @given(attribute_lists, st.booleans())
    def test_framing_is_deterministic(self, attributes: list[str], multiplexer: bool) -> None:
        assert build_framing(attributes, multiplexer=multiplexer) == build_framing(
            list(attributes), multiplexer=multiplexer
        )
