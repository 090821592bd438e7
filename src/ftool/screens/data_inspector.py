"""Data inspector screen: schema and paginated preview of a tabular file."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Sequence

from ..context import Services
from ..core.filters import FilterBuilder, FilterCondition
from ..core.inspector import DataInspector, InspectorTab, Page
from ..core.navigation import CONSUMED, KeyEvent, Pop, Push, Screen, Transition
from ..engine.duckdb_ import SchemaEntry
from ..exceptions import EngineError, FilterError
from ..models import Notice
from .filter_editor import FilterEditorScreen

logger = logging.getLogger(__name__)


@dataclass
class DataInspectorScreen(Screen):
    """Holds the current page and filter; failed loads leave both unchanged."""

    inspector: DataInspector = field(compare=False, repr=False)
    source_path: Path
    schema: List[SchemaEntry]
    page: Page
    filter: FilterBuilder
    active_tab: InspectorTab = InspectorTab.SCHEMA
    scroll: int = 0
    pending_convert: Optional[str] = None
    notice: Optional[Notice] = None

    title = "Data Inspector"

    @classmethod
    def open(cls, services: Services, path: Path) -> "DataInspectorScreen":
        """Open an engine on ``path`` and load the schema and first page.

        Raises:
            EngineError: If the file cannot be read
        """
        inspector = DataInspector(services.open_engine(path))
        try:
            schema = inspector.load_schema()
            builder = FilterBuilder(tuple(e.name for e in schema))
            predicate = builder.compile()
            total = inspector.count(predicate)
            page = inspector.fetch_page(0, predicate, total)
        except EngineError:
            inspector.close()
            raise
        logger.info("Opened %s: %d columns, %d rows", path, len(schema), total)
        return cls(
            inspector=inspector,
            source_path=Path(path),
            schema=schema,
            page=page,
            filter=builder,
        )

    @property
    def bindings(self):
        if self.pending_convert:
            return (("enter", "convert"), ("esc", "cancel"))
        common = (("tab", "switch tab"), ("↑↓", "scroll"))
        if self.active_tab is InspectorTab.PREVIEW:
            common += (("←→", "page"), ("f", "filter"))
        return common + (("c", "convert"), ("esc", "back"), ("q", "quit"))

    @property
    def total_rows(self) -> int:
        return self.page.total_rows or 0

    @property
    def page_count(self) -> int:
        return self.page.page_count or 0

    def on_key(self, event: KeyEvent) -> Transition:
        if self.pending_convert:
            if event.key == "enter":
                self.confirm_convert()
            elif event.key == "escape":
                self.pending_convert = None
            return CONSUMED

        if event.key == "tab":
            self.active_tab = self.active_tab.next()
            self.scroll = 0
        elif event.key in ("up", "k"):
            self.scroll = max(0, self.scroll - 1)
        elif event.key in ("down", "j"):
            self.scroll = min(max(0, self._line_count() - 1), self.scroll + 1)
        elif event.key == "c":
            self.pending_convert = self.inspector.other_format()
        elif event.key == "escape":
            return Pop()
        elif self.active_tab is InspectorTab.PREVIEW:
            if event.key in ("right", "n"):
                self.next_page()
            elif event.key in ("left", "p"):
                self.prev_page()
            elif event.key == "f":
                return Push(FilterEditorScreen.for_columns(self.filter.columns, self.filter.conditions))
        return CONSUMED

    def _line_count(self) -> int:
        if self.active_tab is InspectorTab.SCHEMA:
            return len(self.schema)
        return len(self.page.rows)

    def next_page(self) -> None:
        if self.page.page_index + 1 < self.page_count:
            self._load(self.page.page_index + 1)

    def prev_page(self) -> None:
        if self.page.page_index > 0:
            self._load(self.page.page_index - 1)

    def _load(self, page_index: int) -> bool:
        try:
            page = self.inspector.fetch_page(
                page_index, self.filter.compile(), self.page.total_rows
            )
        except EngineError as e:
            self.notice = Notice.error(e)
            return False
        self.page = page
        self.scroll = 0
        return True

    def resume(self, result: Any) -> None:
        if result is not None:
            self.apply_filter(result)

    def apply_filter(self, conditions: Sequence[FilterCondition]) -> bool:
        """Recount and refetch from page 0 under ``conditions``."""
        try:
            builder = FilterBuilder.from_conditions(self.filter.columns, conditions)
            predicate = builder.compile()
            total = self.inspector.count(predicate)
            page = self.inspector.fetch_page(0, predicate, total)
        except (FilterError, EngineError) as e:
            logger.warning("Filter failed on %s: %s", self.source_path, e)
            self.notice = Notice.error(e)
            return False
        self.filter = builder
        self.page = page
        self.active_tab = InspectorTab.PREVIEW
        self.scroll = 0
        return True

    def confirm_convert(self) -> None:
        target_format, self.pending_convert = self.pending_convert, None
        try:
            target = self.inspector.convert(target_format)
        except EngineError as e:
            self.notice = Notice.error(e)
            return
        self.notice = Notice.success(f"Converted to {target}")

    def dispose(self) -> None:
        self.inspector.close()
