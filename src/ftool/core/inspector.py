"""Data inspector: schema, paginated rows and conversion over one tabular file."""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from ..engine.duckdb_ import DuckDbEngine, SchemaEntry
from .filters import ALWAYS_TRUE, Predicate

logger = logging.getLogger(__name__)

PAGE_SIZE = 50


class InspectorTab(Enum):
    SCHEMA = "Schema"
    PREVIEW = "Preview"

    def next(self) -> "InspectorTab":
        return InspectorTab.PREVIEW if self is InspectorTab.SCHEMA else InspectorTab.SCHEMA


def page_count(total_rows: int, page_size: int = PAGE_SIZE) -> int:
    return math.ceil(total_rows / page_size) if total_rows > 0 else 0


@dataclass(frozen=True)
class Page:
    """One fetched window of rows; replaced wholesale, never patched."""

    columns: Tuple[str, ...]
    rows: Tuple[tuple, ...]
    page_index: int
    page_size: int = PAGE_SIZE
    total_rows: Optional[int] = None

    def __post_init__(self) -> None:
        if self.page_index < 0:
            raise ValueError("page_index must be >= 0")
        if len(self.rows) > self.page_size:
            raise ValueError("Page holds more rows than its page size")

    @property
    def offset(self) -> int:
        return self.page_index * self.page_size

    @property
    def page_count(self) -> Optional[int]:
        if self.total_rows is None:
            return None
        return page_count(self.total_rows, self.page_size)

    @property
    def is_last(self) -> bool:
        count = self.page_count
        return count is None or self.page_index + 1 >= count


class DataInspector:
    """Binds a query engine to one source and hands out immutable pages."""

    def __init__(self, engine: DuckDbEngine, page_size: int = PAGE_SIZE):
        self.engine = engine
        self.page_size = page_size

    @property
    def source_path(self) -> Path:
        return self.engine.path

    @property
    def source_format(self) -> str:
        return self.engine.format

    def load_schema(self) -> List[SchemaEntry]:
        return self.engine.schema()

    def count(self, predicate: Predicate = ALWAYS_TRUE) -> int:
        return self.engine.row_count(predicate)

    def fetch_page(
        self,
        page_index: int,
        predicate: Predicate = ALWAYS_TRUE,
        total_rows: Optional[int] = None,
    ) -> Page:
        """Fetch rows ``[page_index * page_size, +page_size)`` in source order.

        An index past the end yields an empty page.
        """
        if page_index < 0:
            raise ValueError("page_index must be >= 0")
        columns, rows = self.engine.query(
            predicate, offset=page_index * self.page_size, limit=self.page_size
        )
        logger.debug("Fetched page %d (%d rows) of %s", page_index, len(rows), self.source_path)
        return Page(
            columns=tuple(columns),
            rows=tuple(tuple(r) for r in rows),
            page_index=page_index,
            page_size=self.page_size,
            total_rows=total_rows,
        )

    def convert(self, target_format: str) -> Path:
        """Write a converted copy; the inspector stays bound to the source."""
        return self.engine.convert(target_format)

    def other_format(self) -> str:
        return "parquet" if self.source_format == "csv" else "csv"

    def close(self) -> None:
        self.engine.close()
