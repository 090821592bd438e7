"""Textual application hosting the navigator."""

import logging

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Header, Static

from ..core.navigation import KeyEvent, Navigator
from .render import render_screen, render_status

logger = logging.getLogger(__name__)


class FtoolApp(App):
    """Forwards every key to the navigator and redraws its top screen."""

    CSS = """
    Screen { background: $surface; }
    #view { height: 1fr; }
    #status { height: 1; background: $panel; }
    """

    ENABLE_COMMAND_PALETTE = False

    # Keys textual would otherwise consume for focus or quitting
    BINDINGS = [
        Binding("tab", "dispatch('tab')", show=False, priority=True),
        Binding("escape", "dispatch('escape')", show=False, priority=True),
        Binding("ctrl+c", "dispatch('ctrl+c')", show=False, priority=True),
    ]

    def __init__(self, navigator: Navigator):
        super().__init__()
        self.navigator = navigator

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(id="view")
        yield Static(id="status")

    def on_mount(self) -> None:
        self.title = "ftool"
        self.refresh_view()

    def on_key(self, event: events.Key) -> None:
        event.stop()
        self.dispatch_key(KeyEvent(event.key, event.character))

    def action_dispatch(self, key: str) -> None:
        self.dispatch_key(KeyEvent(key))

    def dispatch_key(self, event: KeyEvent) -> None:
        self.navigator.dispatch(event)
        if not self.navigator.running:
            self.exit()
            return
        self.refresh_view()

    def refresh_view(self) -> None:
        if not self.navigator.running:
            return
        screen = self.navigator.top
        self.sub_title = screen.title
        height = max(1, self.size.height - 2)
        self.query_one("#view", Static).update(render_screen(screen, height))
        self.query_one("#status", Static).update(render_status(screen))
