"""Settings state management."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import ValidationError

from .home import load_json
from .models import Settings

logger = logging.getLogger(__name__)

_SETTINGS: Settings | None = None


def reset() -> None:
    """Reset cached settings (primarily for tests)."""

    global _SETTINGS
    _SETTINGS = None


def use(path: Path | None) -> Settings:
    """Load settings from ``path`` and cache them.

    A missing file yields defaults. ``FTOOL_LOG_LEVEL`` overrides the
    configured log level.

    Raises:
        ValueError: If the file is not valid JSON or fails validation
    """

    global _SETTINGS
    data: dict = {}
    if path is not None and path.exists():
        try:
            data = load_json(path)
        except ValueError as e:
            raise ValueError(f"Invalid settings file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid settings file {path}: expected a JSON object")

    env_level = os.getenv("FTOOL_LOG_LEVEL")
    if env_level:
        data["log_level"] = env_level

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid settings file {path}: {e}") from e

    settings.config_path = path
    _SETTINGS = settings
    logger.debug("Loaded settings from %s", path)
    return settings


def require() -> Settings:
    """Return the cached settings, using defaults if nothing was loaded."""

    if _SETTINGS is None:
        return use(None)
    return _SETTINGS


__all__ = ["require", "reset", "use"]
