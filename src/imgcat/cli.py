"""Command line entry point: display image files or stdin inline."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

import aiofiles
import click

from imgcat import __version__
from imgcat.config import ImgcatConfig
from imgcat.debug_log import setup_debug_logging
from imgcat.encoder import Encoder
from imgcat.errors import ImgcatError
from imgcat.limits import STDIN_READ_SIZE
from imgcat.options import parse_length
from imgcat.terminal import EnvironmentCapabilities, StaticCapabilities

if TYPE_CHECKING:
    from collections.abc import Sequence

    from imgcat.config import DisplayConfig
    from imgcat.terminal import TerminalCapabilities

logger = logging.getLogger(__name__)

STDIN_PATH = Path("-")


class _ThreadedReader:
    """Reads a blocking binary stream off the event loop."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    async def read(self, size: int = STDIN_READ_SIZE) -> bytes:
        return await asyncio.to_thread(self._stream.read, size)


class _ThreadedWriter:
    """Writes to a blocking binary stream off the event loop."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    async def write(self, data: bytes) -> int:
        return await asyncio.to_thread(self._stream.write, data)

    async def flush(self) -> None:
        await asyncio.to_thread(self._stream.flush)


def _length_option(
    ctx: click.Context, param: click.Parameter, value: str | None
) -> str | None:
    del ctx
    if value is None:
        return None
    try:
        return parse_length(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param=param) from exc


def _resolve_capabilities(*, force: bool, tmux: bool | None) -> TerminalCapabilities:
    detected = EnvironmentCapabilities()
    if not force and tmux is None:
        return detected
    return StaticCapabilities(
        supported=force or detected.supports_protocol(),
        multiplexer=detected.is_multiplexer() if tmux is None else tmux,
    )


async def _display(
    path: Path,
    out: _ThreadedWriter,
    *,
    display: DisplayConfig,
    display_name: str | None,
    capabilities: TerminalCapabilities,
    chunk_size: int,
) -> None:
    if path == STDIN_PATH:
        options = display.to_options(name=display_name)
        encoder = Encoder(out, *options, capabilities=capabilities, chunk_size=chunk_size)
        await encoder.encode(_ThreadedReader(sys.stdin.buffer))
    else:
        options = display.to_options(
            name=display_name if display_name is not None else path.name,
            size=path.stat().st_size,
        )
        encoder = Encoder(out, *options, capabilities=capabilities, chunk_size=chunk_size)
        async with aiofiles.open(path, "rb") as source:
            await encoder.encode(source)
    await out.flush()
    logger.debug("Displayed %s", path)


async def _display_all(paths: Sequence[Path], **kwargs) -> None:
    out = _ThreadedWriter(sys.stdout.buffer)
    for path in paths:
        await _display(path, out, **kwargs)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument(
    "files",
    nargs=-1,
    type=click.Path(exists=True, dir_okay=False, allow_dash=True, path_type=Path),
)
@click.option("-W", "--width", callback=_length_option, help="Width: N cells, Npx, N% or auto")
@click.option("-H", "--height", callback=_length_option, help="Height: N cells, Npx, N% or auto")
@click.option(
    "--preserve-aspect-ratio/--stretch",
    default=None,
    help="Keep the image's aspect ratio or stretch it to width and height",
)
@click.option(
    "--inline/--download",
    default=None,
    help="Display the image or only download it",
)
@click.option("--name", "display_name", default=None, help="Name reported to the terminal")
@click.option("--force", is_flag=True, help="Skip iTerm2 detection")
@click.option("--tmux/--no-tmux", default=None, help="Force tmux passthrough framing")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: platform config dir)",
)
@click.option("--debug", is_flag=True, help="Log pipeline events to stderr")
@click.option("--version", is_flag=True, help="Show version and exit")
@click.pass_context
def main(
    ctx: click.Context,
    files: tuple[Path, ...],
    width: str | None,
    height: str | None,
    preserve_aspect_ratio: bool | None,
    inline: bool | None,
    display_name: str | None,
    force: bool,
    tmux: bool | None,
    config_path: Path | None,
    debug: bool,
    version: bool,
) -> None:
    """Display images inline in iTerm2. Reads stdin when no FILES are given."""
    if version:
        click.echo(f"imgcat {__version__}")
        ctx.exit(0)

    if debug:
        setup_debug_logging()

    try:
        config = ImgcatConfig.load(config_path)
    except (OSError, ValueError) as exc:
        raise click.ClickException(f"Invalid config: {exc}") from exc

    overrides = {
        "width": width,
        "height": height,
        "preserve_aspect_ratio": preserve_aspect_ratio,
        "inline": inline,
    }
    display = config.display.model_copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )
    capabilities = _resolve_capabilities(force=force or config.encoder.force, tmux=tmux)

    try:
        asyncio.run(
            _display_all(
                files or (STDIN_PATH,),
                display=display,
                display_name=display_name,
                capabilities=capabilities,
                chunk_size=config.encoder.chunk_size,
            )
        )
    except ImgcatError as exc:
        raise click.ClickException(str(exc)) from exc
