"""JSON and GeoJSON inspector screen."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from ..context import Services
from ..core.navigation import CONSUMED, KeyEvent, Pop, Push, Screen, Transition
from ..core.tree import Feature, GeoSummary, TreeModel, pretty_lines
from ..models import Notice
from .tiles_config import TilesConfigScreen

logger = logging.getLogger(__name__)

GEOJSON_TYPES = ("FeatureCollection", "Feature")


class JsonTab(Enum):
    TREE = "Tree"
    RAW = "Raw"
    SUMMARY = "Summary"
    FEATURES = "Features"


JSON_TABS = (JsonTab.TREE, JsonTab.RAW)
GEOJSON_TABS = (JsonTab.SUMMARY, JsonTab.FEATURES, JsonTab.TREE)


def is_geojson(path: Path, tree: TreeModel) -> bool:
    return path.suffix.lower() == ".geojson" or tree.root_type() in GEOJSON_TYPES


@dataclass
class JsonInspectorScreen(Screen):
    services: Services = field(compare=False, repr=False)
    source_path: Path
    tree: TreeModel
    geojson: bool = False
    active_tab: Optional[JsonTab] = None
    cursor: int = 0
    raw_lines: List[str] = field(default_factory=list, compare=False, repr=False)
    feature_table: Tuple[List[str], List[List[str]]] = field(
        default_factory=lambda: ([], []), compare=False, repr=False
    )
    features: List[Feature] = field(default_factory=list, compare=False, repr=False)
    geo_summary: Optional[GeoSummary] = field(default=None, compare=False, repr=False)
    notice: Optional[Notice] = None

    title = "JSON Inspector"

    def __post_init__(self) -> None:
        if self.active_tab is None:
            self.active_tab = self.tabs[0]
        if self.geojson and self.geo_summary is None:
            self.features = self.tree.features()
            self.feature_table = self.tree.feature_rows()
            self.geo_summary = self.tree.summary()

    @classmethod
    def open(cls, services: Services, path: Path) -> "JsonInspectorScreen":
        """Read and parse ``path``.

        Raises:
            OSError: If the file cannot be read
            ParseError: If it is not valid JSON
        """
        path = Path(path)
        value = services.parser.parse(services.fs.read_bytes(path))
        tree = TreeModel.from_value(value)
        logger.info("Opened %s: %d nodes", path, tree.node_count())
        return cls(
            services=services,
            source_path=path,
            tree=tree,
            geojson=is_geojson(path, tree),
            raw_lines=pretty_lines(tree.root),
        )

    @property
    def tabs(self) -> Tuple[JsonTab, ...]:
        return GEOJSON_TABS if self.geojson else JSON_TABS

    @property
    def bindings(self):
        keys = [("tab", "switch tab"), ("↑↓", "move")]
        if self.active_tab is JsonTab.TREE:
            keys += [("enter", "toggle"), ("e", "expand all"), ("c", "collapse all")]
        if self.geojson:
            keys.append(("p", "pmtiles"))
        return tuple(keys + [("esc", "back"), ("q", "quit")])

    def line_count(self) -> int:
        if self.active_tab is JsonTab.TREE:
            return len(self.tree.flatten())
        if self.active_tab is JsonTab.RAW:
            return len(self.raw_lines)
        if self.active_tab is JsonTab.FEATURES:
            return len(self.feature_table[1])
        return 0

    def on_key(self, event: KeyEvent) -> Transition:
        if event.key == "tab":
            tabs = self.tabs
            self.active_tab = tabs[(tabs.index(self.active_tab) + 1) % len(tabs)]
            self.cursor = 0
        elif event.key in ("up", "k"):
            self.cursor = max(0, self.cursor - 1)
        elif event.key in ("down", "j"):
            self.cursor = min(max(0, self.line_count() - 1), self.cursor + 1)
        elif event.key == "escape":
            return Pop()
        elif event.key == "p" and self.geojson:
            return Push(TilesConfigScreen(services=self.services, source_path=self.source_path))
        elif self.active_tab is JsonTab.TREE:
            if event.key == "enter":
                self.toggle_at_cursor()
            elif event.key == "e":
                self.tree.expand_all()
            elif event.key == "c":
                self.tree.collapse_all()
                self.cursor = min(self.cursor, self.line_count() - 1)
        return CONSUMED

    def toggle_at_cursor(self) -> None:
        lines = self.tree.flatten()
        if not lines:
            return
        _, node = lines[min(self.cursor, len(lines) - 1)]
        self.tree.toggle(node.id)
