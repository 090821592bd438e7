"""Home layer: path resolution and file I/O (no Pydantic dependencies)."""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

CONFIG_NAME = "config.json"
LOG_NAME = "ftool.log"


def user_global_home() -> Path:
    """Return the user global directory for ftool (~/.local/ftool)."""
    return Path.home() / ".local" / "ftool"


def resolve_home_dir(home_option: Optional[str] = None) -> Path:
    """
    Resolve the ftool home directory with precedence:
    1. CLI --home flag
    2. FTOOL_HOME env var
    3. ~/.local/ftool
    """
    if home_option:
        return Path(home_option).expanduser()

    env = os.getenv("FTOOL_HOME")
    if env:
        return Path(env).expanduser()

    return user_global_home()


def load_json(path: Path) -> Dict[str, Any]:
    """Load and parse JSON file."""
    return json.loads(path.read_text(encoding="utf-8"))
