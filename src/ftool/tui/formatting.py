"""Value and metadata formatters shared by the renderers."""

from datetime import datetime
from typing import Any, Optional, Tuple

from rich.text import Text

from ..core.tree import NodeKind, TreeNode


def format_size(size: int) -> str:
    """Human-readable byte size.

    Examples:
        >>> format_size(512)
        '512 B'
        >>> format_size(2048)
        '2.0 KB'
    """
    if size < 1024:
        return f"{size} B"
    value = float(size)
    for unit in ("KB", "MB", "GB"):
        value /= 1024
        if value < 1024 or unit == "GB":
            return f"{value:.1f} {unit}"
    return f"{value:.1f} GB"


def format_age(modified: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Age relative to ``now`` as ``Ns/Nm/Nh/Nd ago``."""
    if modified is None:
        return ""
    now = now or datetime.now()
    seconds = max(0, int((now - modified).total_seconds()))
    if seconds < 60:
        return f"{seconds}s ago"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


def style_value(value: Any) -> Text:
    """Apply syntax highlighting to primitive values."""
    if value is None:
        return Text("null", style="dim italic")
    elif isinstance(value, bool):
        return Text(str(value).lower(), style="bold yellow")
    elif isinstance(value, (int, float)):
        return Text(str(value), style="cyan")
    elif isinstance(value, str):
        display_value = value[:97] + "..." if len(value) > 100 else value
        return Text(f'"{display_value}"', style="green")
    else:
        return Text(str(value), style="white")


def style_node(node: TreeNode) -> Text:
    if node.kind is NodeKind.OBJECT:
        return Text(f"{{{len(node.children)}}}", style="dim")
    if node.kind is NodeKind.ARRAY:
        return Text(f"[{len(node.children)}]", style="dim")
    return style_value(node.value)


def format_cell_value(value: Any, max_width: int = 40) -> str:
    """Format a value for table cell display."""
    if value is None:
        return "NULL"
    elif isinstance(value, bool):
        return str(value).lower()
    elif isinstance(value, (int, float)):
        return str(value)
    result = str(value).replace("\n", " ").replace("\r", "")
    if len(result) > max_width:
        return result[: max_width - 3] + "..."
    return result


def window(total: int, cursor: int, height: int) -> Tuple[int, int]:
    """Start and end of a ``height``-line window that keeps ``cursor`` visible."""
    height = max(1, height)
    if total <= height:
        return 0, total
    start = min(max(0, cursor - height // 2), total - height)
    return start, start + height
