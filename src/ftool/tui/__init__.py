"""Terminal UI: textual app and rich renderers."""

from .app import FtoolApp

__all__ = ["FtoolApp"]
