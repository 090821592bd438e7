"""Screens and the initial stack for a start path."""

import logging
from pathlib import Path
from typing import List, Optional

from ..context import Services
from ..core.navigation import Navigator, Push, Screen
from .data_inspector import DataInspectorScreen
from .file_browser import FileBrowserScreen
from .filter_editor import FilterEditorScreen, FilterField
from .home import HomeScreen
from .json_inspector import JsonInspectorScreen, JsonTab
from .tiles_config import TilesConfigScreen

logger = logging.getLogger(__name__)


def initial_stack(services: Services, start: Optional[Path], cwd: Path) -> List[Screen]:
    """Screens to start with for an optional start path.

    No path gives the home menu. A directory opens the browser there. A
    file opens the browser at its parent with the file's inspector on top;
    if the file cannot be opened the browser shows why.

    Raises:
        OSError: If the start directory cannot be listed
    """
    home = HomeScreen(services=services, start_dir=cwd)
    if start is None:
        return [home]

    start = Path(start).resolve()
    if start.is_dir():
        return [home, FileBrowserScreen.open(services, start)]

    browser = FileBrowserScreen.open(services, start.parent)
    for i, entry in enumerate(browser.entries):
        if entry.path == start:
            browser.selected_index = i
            break
    stack: List[Screen] = [home, browser]
    transition = browser.open_file(start)
    if isinstance(transition, Push):
        stack.append(transition.screen)
    return stack


def build_navigator(services: Services, start: Optional[Path], cwd: Path) -> Navigator:
    return Navigator(initial_stack(services, start, cwd))


__all__ = [
    "DataInspectorScreen",
    "FileBrowserScreen",
    "FilterEditorScreen",
    "FilterField",
    "HomeScreen",
    "JsonInspectorScreen",
    "JsonTab",
    "TilesConfigScreen",
    "build_navigator",
    "initial_stack",
]
