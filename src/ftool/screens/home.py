"""Home menu."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..context import Services
from ..core.navigation import CONSUMED, KeyEvent, Pop, Push, Screen, Transition
from ..models import Notice
from .file_browser import FileBrowserScreen

MENU_ITEMS = ("Browse Files", "Inspect Data File")


@dataclass
class HomeScreen(Screen):
    services: Services = field(compare=False, repr=False)
    start_dir: Path
    selected: int = 0
    notice: Optional[Notice] = None

    title = "Home"
    bindings = (("↑↓", "navigate"), ("enter", "select"), ("q", "quit"))

    def on_key(self, event: KeyEvent) -> Transition:
        if event.key in ("up", "k"):
            self.selected = max(0, self.selected - 1)
        elif event.key in ("down", "j"):
            self.selected = min(len(MENU_ITEMS) - 1, self.selected + 1)
        elif event.key == "enter":
            # Both entries start in the file browser; data files open from there
            try:
                return Push(FileBrowserScreen.open(self.services, self.start_dir))
            except OSError as e:
                self.notice = Notice.error(e)
        elif event.key == "escape":
            return Pop()
        return CONSUMED
