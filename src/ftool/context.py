"""ftool context for passing state between commands and screens."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional

import click

from .engine.duckdb_ import DuckDbEngine
from .engine.filesystem import LocalFilesystem
from .engine.parser import JsonParser
from .engine.tippecanoe import TippecanoeRunner
from .home import CONFIG_NAME, LOG_NAME, resolve_home_dir
from .models import Settings


@dataclass(frozen=True)
class HomePaths:
    """Resolved paths for settings and logs."""

    home_dir: Path
    config_path: Path
    log_path: Path


def resolve_home(home_option: Optional[str]) -> HomePaths:
    """Resolve home directory, config file and default log file.

    Args:
        home_option: Value of --home CLI option if provided

    Returns:
        HomePaths for the resolved home directory
    """
    home_dir = resolve_home_dir(home_option)
    return HomePaths(
        home_dir=home_dir,
        config_path=home_dir / CONFIG_NAME,
        log_path=home_dir / LOG_NAME,
    )


@dataclass
class Services:
    """Collaborators handed to screens at construction time.

    ``engine_factory`` opens one query-engine connection per data inspector.
    """

    fs: LocalFilesystem = field(default_factory=LocalFilesystem)
    parser: JsonParser = field(default_factory=JsonParser)
    engine_factory: Callable[..., DuckDbEngine] = DuckDbEngine
    tiles: TippecanoeRunner = field(default_factory=TippecanoeRunner)
    engine_timeout: Optional[float] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Services":
        return cls(
            fs=LocalFilesystem(show_hidden=settings.show_hidden),
            engine_timeout=settings.engine_timeout,
        )

    def open_engine(self, path: Path) -> DuckDbEngine:
        return self.engine_factory(path, timeout=self.engine_timeout)


class FtoolContext:
    def __init__(self):
        self.home = None
        self.settings = None
        self.log_path = None

    def services(self) -> Services:
        return Services.from_settings(self.settings or Settings())


pass_context = click.make_pass_decorator(FtoolContext, ensure=True)
