"""PMTiles options screen for a GeoJSON source."""

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from ..context import Services
from ..core.navigation import CONSUMED, KeyEvent, Pop, Screen, Transition
from ..engine.tippecanoe import Preset, TilesConfig
from ..exceptions import TilesError
from ..models import Notice

logger = logging.getLogger(__name__)

TILE_FIELDS = (
    "preset",
    "min_zoom",
    "max_zoom",
    "no_feature_limit",
    "no_tile_size_limit",
    "drop_densest_as_needed",
)

FIELD_LABELS = {
    "preset": "Preset",
    "min_zoom": "Minimum zoom",
    "max_zoom": "Maximum zoom",
    "no_feature_limit": "No feature limit",
    "no_tile_size_limit": "No tile size limit",
    "drop_densest_as_needed": "Drop densest as needed",
}


@dataclass
class TilesConfigScreen(Screen):
    services: Services = field(compare=False, repr=False)
    source_path: Path
    config: TilesConfig = field(default_factory=TilesConfig)
    preset: Preset = Preset.CUSTOM
    field_cursor: int = 0
    notice: Optional[Notice] = None

    title = "PMTiles"
    bindings = (
        ("↑↓", "field"),
        ("←→", "change"),
        ("space", "toggle"),
        ("enter", "generate"),
        ("esc", "back"),
        ("q", "quit"),
    )

    @property
    def current_field(self) -> str:
        return TILE_FIELDS[self.field_cursor]

    def on_key(self, event: KeyEvent) -> Transition:
        if event.key in ("up", "k"):
            self.field_cursor = max(0, self.field_cursor - 1)
        elif event.key in ("down", "j"):
            self.field_cursor = min(len(TILE_FIELDS) - 1, self.field_cursor + 1)
        elif event.key in ("left", "right"):
            self.adjust(-1 if event.key == "left" else 1)
        elif event.key == "space":
            self.adjust(1)
        elif event.key == "enter":
            self.generate()
        elif event.key == "escape":
            return Pop()
        return CONSUMED

    def adjust(self, step: int) -> None:
        name = self.current_field
        if name == "preset":
            self.preset = self.preset.next(step)
            self.config = self.config.with_preset(self.preset)
        elif name == "min_zoom":
            self.config = self.config.with_zooms(self.config.min_zoom + step, self.config.max_zoom)
            self.preset = Preset.CUSTOM
        elif name == "max_zoom":
            self.config = self.config.with_zooms(self.config.min_zoom, self.config.max_zoom + step)
            self.preset = Preset.CUSTOM
        else:
            self.config = replace(self.config, **{name: not getattr(self.config, name)})

    def generate(self) -> None:
        try:
            target = self.services.tiles.run(self.source_path, self.config)
        except TilesError as e:
            logger.warning("PMTiles generation failed for %s: %s", self.source_path, e)
            self.notice = Notice.error(e)
            return
        self.notice = Notice.success(f"Generated {target}")
