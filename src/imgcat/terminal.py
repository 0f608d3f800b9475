"""Terminal capability detection.

Detection is an injected strategy: ``Encoder`` asks a ``TerminalCapabilities``
object whether inline images are supported and whether output passes through
a multiplexer. ``EnvironmentCapabilities`` answers from environment variables,
``StaticCapabilities`` answers with fixed values.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping

ITERM_TERM_PROGRAM = "iTerm.app"
ITERM_LC_TERMINAL = "iTerm2"

# TMUX_TEST=true/false forces multiplexer detection.
_TMUX_OVERRIDE_ENV = "TMUX_TEST"


class TerminalCapabilities(Protocol):
    def supports_protocol(self) -> bool: ...

    def is_multiplexer(self) -> bool: ...


class EnvironmentCapabilities:
    """Capabilities read from the process environment (or a given mapping)."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ

    def _get(self, key: str) -> str:
        environ = os.environ if self._environ is None else self._environ
        return environ.get(key, "")

    def supports_protocol(self) -> bool:
        """Check whether the terminal is iTerm2.

        tmux rewrites TERM_PROGRAM, so LC_TERMINAL (exported by iTerm2 and
        preserved by tmux and ssh) is accepted as well.
        """
        return (
            self._get("TERM_PROGRAM") == ITERM_TERM_PROGRAM
            or self._get("LC_TERMINAL") == ITERM_LC_TERMINAL
        )

    def is_multiplexer(self) -> bool:
        """Check whether output goes through tmux or screen.

        NOTE: without iTerm2's tmux integration (tmux -CC), tmux does not know
        the size of the image and may draw its prompt and cursor over it.
        """
        override = self._get(_TMUX_OVERRIDE_ENV)
        if override == "false":
            return False
        if override == "true":
            return True
        return self._get("TERM") == "screen" or bool(self._get("TMUX"))


@dataclass(frozen=True, slots=True)
class StaticCapabilities:
    """Fixed capability answers."""

    supported: bool = True
    multiplexer: bool = False

    def supports_protocol(self) -> bool:
        return self.supported

    def is_multiplexer(self) -> bool:
        return self.multiplexer


def is_supported() -> bool:
    """Check whether inline images work in the current terminal."""
    return EnvironmentCapabilities().supports_protocol()


def is_tmux() -> bool:
    """Check whether the current terminal runs inside a multiplexer."""
    return EnvironmentCapabilities().is_multiplexer()
