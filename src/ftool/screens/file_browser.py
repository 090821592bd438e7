"""Directory browser with file preview."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..context import Services
from ..core.navigation import CONSUMED, KeyEvent, Pop, Push, Screen, Transition
from ..engine.filesystem import DirEntry, file_kind
from ..exceptions import EngineError, ParseError
from ..models import Notice
from .data_inspector import DataInspectorScreen
from .json_inspector import JsonInspectorScreen

logger = logging.getLogger(__name__)


@dataclass
class FileBrowserScreen(Screen):
    services: Services = field(compare=False, repr=False)
    cwd: Path
    entries: List[DirEntry]
    selected_index: int = 0
    notice: Optional[Notice] = None

    title = "File Browser"
    bindings = (
        ("↑↓", "navigate"),
        ("enter", "open"),
        ("backspace", "parent"),
        ("esc", "back"),
        ("q", "quit"),
    )

    @classmethod
    def open(cls, services: Services, cwd: Path) -> "FileBrowserScreen":
        """List ``cwd``; raises ``OSError`` if it cannot be read."""
        cwd = Path(cwd).resolve()
        return cls(services=services, cwd=cwd, entries=services.fs.list_dir(cwd))

    @property
    def selected_entry(self) -> Optional[DirEntry]:
        if not self.entries:
            return None
        return self.entries[self.selected_index]

    def on_key(self, event: KeyEvent) -> Transition:
        if event.key in ("up", "k"):
            self.selected_index = max(0, self.selected_index - 1)
        elif event.key in ("down", "j"):
            self.selected_index = min(max(0, len(self.entries) - 1), self.selected_index + 1)
        elif event.key == "home":
            self.selected_index = 0
        elif event.key == "end":
            self.selected_index = max(0, len(self.entries) - 1)
        elif event.key == "backspace":
            if self.cwd.parent != self.cwd:
                self.change_dir(self.cwd.parent)
        elif event.key == "enter":
            return self.enter()
        elif event.key == "escape":
            return Pop()
        return CONSUMED

    def change_dir(self, path: Path) -> None:
        """Re-list at ``path``; on failure stay put and show the error."""
        previous = self.cwd
        try:
            entries = self.services.fs.list_dir(path)
        except OSError as e:
            logger.warning("Cannot list %s: %s", path, e)
            self.notice = Notice.error(f"Cannot open {path}: {e.strerror or e}")
            return
        self.cwd = Path(path).resolve()
        self.entries = entries
        self.selected_index = 0
        # Coming up from a child directory, keep it selected
        for i, entry in enumerate(entries):
            if not entry.is_parent and entry.path == previous:
                self.selected_index = i
                break

    def enter(self) -> Transition:
        entry = self.selected_entry
        if entry is None:
            return CONSUMED
        if entry.is_dir:
            self.change_dir(entry.path)
            return CONSUMED
        return self.open_file(entry.path)

    def open_file(self, path: Path) -> Transition:
        """Push the inspector matching the file type, or show why not."""
        kind = file_kind(path)
        try:
            if kind == "tabular":
                return Push(DataInspectorScreen.open(self.services, path))
            if kind == "json":
                return Push(JsonInspectorScreen.open(self.services, path))
        except (EngineError, ParseError, OSError) as e:
            logger.warning("Cannot open %s: %s", path, e)
            self.notice = Notice.error(e)
            return CONSUMED

        suffix = path.suffix or path.name
        self.notice = Notice.error(f"Unsupported file type: {suffix}")
        return CONSUMED
