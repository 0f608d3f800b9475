"""Configuration loader for imgcat."""

from __future__ import annotations

import tomllib
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, field_validator

from imgcat.limits import DEFAULT_CHUNK_SIZE
from imgcat.options import DisplayOptions, parse_length
from imgcat.paths import get_config_path

if TYPE_CHECKING:
    from pathlib import Path


class DisplayConfig(BaseModel):
    """Default display attributes."""

    width: str | None = Field(default=None, description="Width: N, Npx, N% or auto")
    height: str | None = Field(default=None, description="Height: N, Npx, N% or auto")
    preserve_aspect_ratio: bool | None = Field(
        default=None, description="Keep the aspect ratio (None = terminal default)"
    )
    inline: bool = Field(default=True, description="Display inline instead of downloading")

    @field_validator("width", "height", mode="before")
    @classmethod
    def _validate_length(cls, value: object) -> object:
        if value is None:
            return None
        if isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str):
            msg = f"Length must be a string or integer, got {type(value).__name__}"
            raise ValueError(msg)
        return parse_length(value)

    def to_options(self, *, name: str | None = None, size: int | None = None) -> DisplayOptions:
        """Build display options from these defaults plus per-image values."""
        return DisplayOptions.build(
            name=name,
            size=size,
            width=self.width,
            height=self.height,
            preserve_aspect_ratio=self.preserve_aspect_ratio,
            inline=self.inline,
        )


class EncoderConfig(BaseModel):
    """Encoder tuning."""

    chunk_size: int = Field(
        default=DEFAULT_CHUNK_SIZE, gt=0, description="Bytes read from the source per step"
    )
    force: bool = Field(default=False, description="Skip terminal support detection")


class ImgcatConfig(BaseModel):
    """Root configuration model."""

    display: DisplayConfig = Field(default_factory=DisplayConfig)
    encoder: EncoderConfig = Field(default_factory=EncoderConfig)

    @classmethod
    def load(cls, config_path: Path | None = None) -> ImgcatConfig:
        """Load configuration from TOML file or use defaults."""
        if config_path is None:
            config_path = get_config_path()

        if config_path.exists():
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
            return cls.model_validate(data)

        return cls()
