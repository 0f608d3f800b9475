"""Pytest fixtures for imgcat tests."""

from __future__ import annotations

import os

import pytest
from hypothesis import HealthCheck, Phase, Verbosity, settings

from imgcat.terminal import StaticCapabilities

_TERMINAL_VARS = ("TERM_PROGRAM", "LC_TERMINAL", "TERM", "TMUX", "TMUX_TEST")

# The autouse environment fixture resets process state once per test, not per
# example.
_SHARED_FIXTURES_OK = [HealthCheck.function_scoped_fixture]


settings.register_profile(
    "ci",
    max_examples=100,
    deadline=None,
    suppress_health_check=_SHARED_FIXTURES_OK,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
)
settings.register_profile(
    "dev",
    max_examples=20,
    deadline=None,
    suppress_health_check=_SHARED_FIXTURES_OK,
)
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
    suppress_health_check=_SHARED_FIXTURES_OK,
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Run every test outside iTerm2/tmux with a private config dir."""
    for var in _TERMINAL_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("IMGCAT_CONFIG_DIR", str(tmp_path / "config"))


@pytest.fixture
def iterm() -> StaticCapabilities:
    return StaticCapabilities(supported=True, multiplexer=False)


@pytest.fixture
def iterm_in_tmux() -> StaticCapabilities:
    return StaticCapabilities(supported=True, multiplexer=True)
