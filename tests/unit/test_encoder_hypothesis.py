"""Property-based tests for the streaming encoder."""

from __future__ import annotations

import asyncio
import base64
import io

import pytest
from hypothesis import given
from hypothesis import strategies as st

from imgcat.encoder import Encoder
from imgcat.framing import OSC_INTRODUCER, OSC_TERMINATOR, TMUX_INTRODUCER, TMUX_TERMINATOR
from imgcat.terminal import StaticCapabilities
from tests.helpers.streams import ChunkedSource, MemorySink
from tests.strategies import attribute_lists, chunk_sizes, payloads

pytestmark = pytest.mark.unit


def _encode(payload: bytes, attributes: list[str], *, multiplexer: bool, chunk_size: int) -> bytes:
    sink = MemorySink()
    encoder = Encoder(
        sink,
        *attributes,
        capabilities=StaticCapabilities(multiplexer=multiplexer),
        chunk_size=chunk_size,
    )
    asyncio.run(encoder.encode(io.BytesIO(payload)))
    return sink.data


def _split(output: bytes, *, multiplexer: bool) -> tuple[bytes, bytes, bytes]:
    introducer = TMUX_INTRODUCER if multiplexer else OSC_INTRODUCER
    terminator = TMUX_TERMINATOR if multiplexer else OSC_TERMINATOR
    assert output.startswith(introducer)
    assert output.endswith(terminator)
    header_end = output.index(b":") + 1
    return output[:header_end], output[header_end : -len(terminator)], output[-len(terminator) :]


@given(payloads, attribute_lists, st.booleans(), chunk_sizes)
def test_body_decodes_to_input(
    payload: bytes, attributes: list[str], multiplexer: bool, chunk_size: int
) -> None:
    output = _encode(payload, attributes, multiplexer=multiplexer, chunk_size=chunk_size)

    _header, body, _footer = _split(output, multiplexer=multiplexer)
    assert base64.b64decode(body, validate=True) == payload


@given(payloads, chunk_sizes)
def test_body_is_exact_standard_encoding(payload: bytes, chunk_size: int) -> None:
    output = _encode(payload, ["inline=1"], multiplexer=False, chunk_size=chunk_size)

    _header, body, _footer = _split(output, multiplexer=False)
    assert body == base64.standard_b64encode(payload)


@given(payloads, attribute_lists)
def test_multiplexer_mode_changes_only_framing(payload: bytes, attributes: list[str]) -> None:
    plain = _encode(payload, attributes, multiplexer=False, chunk_size=16)
    tmux = _encode(payload, attributes, multiplexer=True, chunk_size=16)

    plain_core = plain.removeprefix(OSC_INTRODUCER).removesuffix(OSC_TERMINATOR)
    tmux_core = tmux.removeprefix(TMUX_INTRODUCER).removesuffix(TMUX_TERMINATOR)
    assert plain_core == tmux_core


@given(payloads, st.integers(min_value=1, max_value=7))
def test_source_read_granularity_does_not_matter(payload: bytes, step: int) -> None:
    sink = MemorySink()
    encoder = Encoder(sink, capabilities=StaticCapabilities(), chunk_size=32)

    asyncio.run(encoder.encode(ChunkedSource(payload, step)))

    framing = encoder.framing()
    assert sink.data == framing.header + base64.standard_b64encode(payload) + framing.footer
