"""XDG-compliant path helpers for imgcat configuration."""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_config_dir


def get_config_dir() -> Path:
    """Get the config directory for imgcat (config.toml)."""
    override = os.environ.get("IMGCAT_CONFIG_DIR")
    if override:
        return Path(override).resolve()
    return Path(user_config_dir("imgcat"))


def get_config_path() -> Path:
    """Get the path to the main config file."""
    return get_config_dir() / "config.toml"
