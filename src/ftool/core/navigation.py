"""Navigation engine: a screen stack driven by key events.

The top screen handles each event and returns a transition. The engine
applies it before the next event is read.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyEvent:
    """A key press using textual key names (``up``, ``enter``, ``a``...)."""

    key: str
    character: Optional[str] = None

    @property
    def is_printable(self) -> bool:
        return self.character is not None and len(self.character) == 1 and self.character.isprintable()


class Transition:
    """Base class for what a screen asks the engine to do."""


@dataclass(frozen=True)
class Consumed(Transition):
    pass


@dataclass(frozen=True)
class Push(Transition):
    screen: Any


@dataclass(frozen=True)
class Pop(Transition):
    """Leave the top screen, optionally handing ``result`` to the one below."""

    result: Any = None


@dataclass(frozen=True)
class Replace(Transition):
    screen: Any


@dataclass(frozen=True)
class Quit(Transition):
    pass


CONSUMED = Consumed()
QUIT = Quit()


class Screen:
    """Base class for screens.

    Subclasses implement ``on_key``. While a ``notice`` is shown every key
    except enter/escape is swallowed, and those two dismiss it.
    """

    title = ""
    bindings: Tuple[Tuple[str, str], ...] = ()

    @property
    def captures_text(self) -> bool:
        return False

    def handle(self, event: KeyEvent) -> Transition:
        if getattr(self, "notice", None) is not None:
            if event.key in ("enter", "escape"):
                self.notice = None
            return CONSUMED
        return self.on_key(event)

    def on_key(self, event: KeyEvent) -> Transition:
        raise NotImplementedError

    def resume(self, result: Any) -> None:
        """Receive the result of a screen that was popped off this one."""

    def dispose(self) -> None:
        """Release collaborator handles when leaving the stack."""


class Navigator:
    """Owns the screen stack; never empty while running."""

    def __init__(self, screens: Sequence[Screen]):
        if not screens:
            raise ValueError("Navigator needs at least one screen")
        self._stack: List[Screen] = list(screens)
        self.running = True

    @property
    def top(self) -> Screen:
        return self._stack[-1]

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def stack(self) -> Tuple[Screen, ...]:
        return tuple(self._stack)

    def dispatch(self, event: KeyEvent) -> None:
        if not self.running:
            return
        if event.key == "ctrl+c" or (event.key == "q" and not self.top.captures_text):
            self.apply(QUIT)
            return
        self.apply(self.top.handle(event))

    def apply(self, transition: Transition) -> None:
        if isinstance(transition, Consumed):
            return
        if isinstance(transition, Push):
            logger.debug("Push %s", type(transition.screen).__name__)
            self._stack.append(transition.screen)
        elif isinstance(transition, Pop):
            if len(self._stack) == 1:
                self.apply(QUIT)
                return
            popped = self._stack.pop()
            logger.debug("Pop %s", type(popped).__name__)
            popped.dispose()
            self.top.resume(transition.result)
        elif isinstance(transition, Replace):
            old = self._stack.pop()
            logger.debug("Replace %s with %s", type(old).__name__, type(transition.screen).__name__)
            old.dispose()
            self._stack.append(transition.screen)
        elif isinstance(transition, Quit):
            while self._stack:
                self._stack.pop().dispose()
            self.running = False
        else:
            raise TypeError(f"Unknown transition: {transition!r}")
