"""Rich renderables for each screen and the status bar."""

import logging
from typing import List

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..core.inspector import InspectorTab
from ..core.navigation import Screen
from ..engine.filesystem import file_kind
from ..engine.tippecanoe import output_path
from ..models import Notice
from ..screens import (
    DataInspectorScreen,
    FileBrowserScreen,
    FilterEditorScreen,
    FilterField,
    HomeScreen,
    JsonInspectorScreen,
    JsonTab,
    TilesConfigScreen,
)
from ..screens.home import MENU_ITEMS
from ..screens.tiles_config import FIELD_LABELS, TILE_FIELDS
from .formatting import format_age, format_cell_value, format_size, style_node, window

logger = logging.getLogger(__name__)

PREVIEW_LINES = 12
CURSOR_STYLE = "reverse"


def render_tabs(tabs, active) -> Text:
    text = Text()
    for i, tab in enumerate(tabs):
        if i:
            text.append(" | ", style="dim")
        text.append(f" {tab.value} ", style="bold reverse" if tab is active else "")
    return text


def render_notice(notice: Notice) -> Panel:
    return Panel(
        Text(notice.body),
        title=notice.title,
        subtitle="enter/esc to close",
        border_style="red" if notice.is_error else "green",
    )


def render_status(screen: Screen) -> Text:
    text = Text()
    for key, action in screen.bindings:
        text.append(f" {key} ", style="bold reverse")
        text.append(f" {action}  ")
    return text


def render_home(screen: HomeScreen, height: int) -> RenderableType:
    text = Text()
    text.append("ftool\n", style="bold")
    text.append("Browse files and inspect data\n\n", style="dim")
    for i, item in enumerate(MENU_ITEMS):
        if i == screen.selected:
            text.append(f"> {item}\n", style=CURSOR_STYLE)
        else:
            text.append(f"  {item}\n")
    return Panel(text, title="Home")


def _file_preview(screen: FileBrowserScreen) -> RenderableType:
    entry = screen.selected_entry
    if entry is None:
        return Text("Empty directory", style="dim")
    if entry.is_dir:
        return Text(f"Directory\n{entry.path}", style="bold")

    info = Table.grid(padding=(0, 1))
    info.add_row(Text("Size", style="bold"), format_size(entry.size))
    info.add_row(Text("Modified", style="bold"), format_age(entry.modified))
    info.add_row(Text("Type", style="bold"), entry.path.suffix.lstrip(".") or "file")
    parts: List[RenderableType] = [info]

    if entry.path.suffix.lower() != ".parquet":
        try:
            head = screen.services.fs.read_head(entry.path, PREVIEW_LINES)
        except OSError as e:
            logger.debug("No preview for %s: %s", entry.path, e)
        else:
            parts.append(Text("\n".join(head), style="dim", no_wrap=True, overflow="ellipsis"))
    if file_kind(entry.path) != "other":
        parts.append(Text("enter to inspect", style="italic"))
    return Group(*parts)


def render_file_browser(screen: FileBrowserScreen, height: int) -> RenderableType:
    table = Table(expand=True, box=None, show_edge=False)
    table.add_column("Name", ratio=3, no_wrap=True)
    table.add_column("Size", justify="right")
    table.add_column("Modified", justify="right")

    start, end = window(len(screen.entries), screen.selected_index, height - 4)
    for i in range(start, end):
        entry = screen.entries[i]
        name = Text(entry.name + ("/" if entry.is_dir and not entry.is_parent else ""))
        if entry.is_dir:
            name.stylize("bold blue")
        size = "" if entry.is_dir else format_size(entry.size)
        table.add_row(
            name,
            size,
            format_age(entry.modified),
            style=CURSOR_STYLE if i == screen.selected_index else None,
        )

    layout = Table.grid(expand=True)
    layout.add_column(ratio=3)
    layout.add_column(ratio=2)
    layout.add_row(
        Panel(table, title=str(screen.cwd)),
        Panel(_file_preview(screen), title="Preview"),
    )
    return layout


def _schema_table(screen: DataInspectorScreen, height: int) -> Table:
    table = Table(expand=True)
    for name in ("Column", "Type", "Nulls", "Min", "Max", "Avg"):
        table.add_column(name, no_wrap=True)
    start, end = window(len(screen.schema), screen.scroll, height)
    for entry in screen.schema[start:end]:
        stats = [
            "" if v is None else format_cell_value(v) for v in (entry.min, entry.max, entry.avg)
        ]
        table.add_row(entry.name, entry.declared_type, str(entry.null_count), *stats)
    return table


def _preview_table(screen: DataInspectorScreen, height: int) -> Table:
    page = screen.page
    table = Table(expand=True)
    table.add_column("#", justify="right", style="dim")
    for column in page.columns:
        table.add_column(column, no_wrap=True)
    start, end = window(len(page.rows), screen.scroll, height)
    for i in range(start, end):
        cells = [format_cell_value(v) for v in page.rows[i]]
        table.add_row(str(page.offset + i + 1), *cells)
    return table


def preview_footer(screen: DataInspectorScreen) -> str:
    page = screen.page
    if page.rows:
        shown = f"showing {page.offset + 1} to {page.offset + len(page.rows)} of {screen.total_rows}"
    else:
        shown = f"showing 0 of {screen.total_rows}"
    parts = [shown, f"page {page.page_index + 1} of {max(1, screen.page_count)}"]
    if len(screen.filter):
        parts.append(f"{len(screen.filter)} filters active")
    return "  |  ".join(parts)


def render_data_inspector(screen: DataInspectorScreen, height: int) -> RenderableType:
    parts: List[RenderableType] = [
        Text(str(screen.source_path), style="bold"),
        render_tabs(tuple(InspectorTab), screen.active_tab),
    ]
    body_height = max(1, height - 8)
    if screen.active_tab is InspectorTab.SCHEMA:
        parts.append(_schema_table(screen, body_height))
        parts.append(Text(f"{len(screen.schema)} columns, {screen.total_rows} rows", style="dim"))
    else:
        parts.append(_preview_table(screen, body_height))
        parts.append(Text(preview_footer(screen), style="dim"))
        for condition in screen.filter:
            parts.append(Text(f"  {condition.describe()}", style="yellow"))
    if screen.pending_convert:
        parts.append(
            Panel(
                Text(f"Convert {screen.source_path.name} to {screen.pending_convert}?"),
                title="Convert",
                subtitle="enter to convert, esc to cancel",
                border_style="yellow",
            )
        )
    return Group(*parts)


def render_filter_editor(screen: FilterEditorScreen, height: int) -> RenderableType:
    text = Text()
    text.append("Active filters\n", style="bold")
    if not screen.draft_conditions:
        text.append("  (none)\n", style="dim")
    for condition in screen.draft_conditions:
        text.append(f"  {condition.describe()}\n", style="yellow")
    text.append("\n")

    fields = (
        (FilterField.COLUMN, screen.column or ""),
        (FilterField.OPERATOR, screen.operator.value),
        (FilterField.VALUE, screen.value_input + ("_" if screen.captures_text else "")),
    )
    for name, value in fields:
        if name is FilterField.VALUE and screen.operator.is_unary:
            value = "(no value)"
        style = CURSOR_STYLE if name is screen.field_cursor else ""
        text.append(f"{name.value:>9}: ", style="bold")
        text.append(f" {value} \n", style=style)

    if screen.error:
        text.append(f"\n{screen.error}\n", style="bold red")
    return Panel(text, title="Filter")


def _tree_lines(screen: JsonInspectorScreen, height: int) -> Text:
    lines = screen.tree.flatten()
    start, end = window(len(lines), screen.cursor, height)
    text = Text()
    for i in range(start, end):
        depth, node = lines[i]
        line = Text("  " * depth)
        if node.is_container:
            line.append("▶ " if node.collapsed else "▼ ", style="dim")
        else:
            line.append("  ")
        if node.key is not None:
            line.append(node.key, style="bold blue")
            line.append(": ")
        line.append_text(style_node(node))
        if i == screen.cursor:
            line.stylize(CURSOR_STYLE)
        text.append_text(line)
        text.append("\n")
    return text


def _raw_lines(screen: JsonInspectorScreen, height: int) -> Text:
    start, end = window(len(screen.raw_lines), screen.cursor, height)
    text = Text()
    for i in range(start, end):
        text.append(screen.raw_lines[i] + "\n", style=CURSOR_STYLE if i == screen.cursor else "")
    return text


def _summary(screen: JsonInspectorScreen) -> Table:
    summary = screen.geo_summary or screen.tree.summary()
    grid = Table.grid(padding=(0, 2))
    grid.add_row(Text("Features", style="bold"), str(summary.feature_count))
    grid.add_row(
        Text("Geometry types", style="bold"), ", ".join(summary.geometry_types) or "none"
    )
    if summary.bbox:
        bounds = ", ".join(f"{v:.6f}" for v in summary.bbox)
        grid.add_row(Text("Bounds", style="bold"), f"[{bounds}]")
    return grid


def _features_table(screen: JsonInspectorScreen, height: int) -> Table:
    features = screen.features
    headers, rows = screen.feature_table
    table = Table(expand=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("geometry")
    for header in headers:
        table.add_column(header, no_wrap=True)
    start, end = window(len(rows), screen.cursor, height)
    for i in range(start, end):
        table.add_row(
            str(i),
            features[i].geometry_type or "",
            *[format_cell_value(v) for v in rows[i]],
            style=CURSOR_STYLE if i == screen.cursor else None,
        )
    return table


def render_json_inspector(screen: JsonInspectorScreen, height: int) -> RenderableType:
    parts: List[RenderableType] = [
        Text(str(screen.source_path), style="bold"),
        render_tabs(screen.tabs, screen.active_tab),
    ]
    body_height = max(1, height - 6)
    if screen.active_tab is JsonTab.TREE:
        parts.append(_tree_lines(screen, body_height))
    elif screen.active_tab is JsonTab.RAW:
        parts.append(_raw_lines(screen, body_height))
    elif screen.active_tab is JsonTab.SUMMARY:
        parts.append(_summary(screen))
    else:
        parts.append(_features_table(screen, body_height))
    return Group(*parts)


def render_tiles_config(screen: TilesConfigScreen, height: int) -> RenderableType:
    text = Text()
    for i, name in enumerate(TILE_FIELDS):
        if name == "preset":
            value = screen.preset.label
        elif name in ("min_zoom", "max_zoom"):
            value = str(getattr(screen.config, name))
        else:
            value = "[x]" if getattr(screen.config, name) else "[ ]"
        text.append(f"{FIELD_LABELS[name]:>24}: ", style="bold")
        text.append(f" {value} \n", style=CURSOR_STYLE if i == screen.field_cursor else "")
    text.append(f"\nOutput: {output_path(screen.source_path)}\n", style="dim")
    return Panel(text, title=f"PMTiles: {screen.source_path.name}")


RENDERERS = {
    HomeScreen: render_home,
    FileBrowserScreen: render_file_browser,
    DataInspectorScreen: render_data_inspector,
    FilterEditorScreen: render_filter_editor,
    JsonInspectorScreen: render_json_inspector,
    TilesConfigScreen: render_tiles_config,
}


def render_screen(screen: Screen, height: int = 40) -> RenderableType:
    renderable = RENDERERS[type(screen)](screen, height)
    notice = getattr(screen, "notice", None)
    if notice is not None:
        return Group(renderable, render_notice(notice))
    return renderable
