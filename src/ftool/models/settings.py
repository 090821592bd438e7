"""Settings model for config.json in the ftool home directory."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class Settings(BaseModel):
    """User settings.

    ``engine_timeout`` bounds every DuckDB call (seconds). ``None`` waits
    forever.
    """

    engine_timeout: float | None = Field(default=None, gt=0)
    show_hidden: bool = False
    log_level: str = "WARNING"
    log_file: Path | None = None
    config_path: Path | None = Field(default=None, exclude=True)

    @field_validator("log_level")
    @classmethod
    def known_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level
