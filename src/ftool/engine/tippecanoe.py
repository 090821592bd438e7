"""PMTiles generation for GeoJSON files through the tippecanoe program."""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import List, Union

from ..exceptions import TilesError
from ..models import Completed
from ..process_utils import run_with_validation

logger = logging.getLogger(__name__)

TIPPECANOE = "tippecanoe"
MAX_ZOOM_LIMIT = 24


class Preset(Enum):
    CUSTOM = ("Custom", None)
    GENERIC = ("Generic (6-18)", (6, 18))
    PARCELS = ("Parcels (0-16)", (0, 16))
    POINTS = ("Points (0-18)", (0, 18))

    def __init__(self, label, zooms):
        self.label = label
        self.zooms = zooms

    def next(self, step: int = 1) -> "Preset":
        members = list(Preset)
        return members[(members.index(self) + step) % len(members)]


@dataclass(frozen=True)
class TilesConfig:
    min_zoom: int = 0
    max_zoom: int = 14
    no_feature_limit: bool = False
    no_tile_size_limit: bool = False
    drop_densest_as_needed: bool = False

    def with_preset(self, preset: Preset) -> "TilesConfig":
        """Overwrite the zoom range; ``Preset.CUSTOM`` keeps it."""
        if preset.zooms is None:
            return self
        low, high = preset.zooms
        return replace(self, min_zoom=low, max_zoom=high)

    def with_zooms(self, min_zoom: int, max_zoom: int) -> "TilesConfig":
        """Set zooms clamped to 0..24 with ``min_zoom <= max_zoom``."""
        min_zoom = max(0, min(MAX_ZOOM_LIMIT, min_zoom))
        max_zoom = max(min_zoom, min(MAX_ZOOM_LIMIT, max_zoom))
        return replace(self, min_zoom=min_zoom, max_zoom=max_zoom)


def output_path(source: Union[str, Path]) -> Path:
    """``<stem>.pmtiles`` next to the source file."""
    source = Path(source)
    return source.with_name(f"{source.stem}.pmtiles")


def build_command(source: Union[str, Path], config: TilesConfig) -> List[str]:
    cmd = [
        TIPPECANOE,
        "--force",
        "--read-parallel",
        f"--minimum-zoom={config.min_zoom}",
        f"--maximum-zoom={config.max_zoom}",
        f"--output={output_path(source)}",
    ]
    if config.no_feature_limit:
        cmd.append("--no-feature-limit")
    if config.no_tile_size_limit:
        cmd.append("--no-tile-size-limit")
    if config.drop_densest_as_needed:
        cmd.append("--drop-densest-as-needed")
    # Input file is always last
    cmd.append(str(source))
    return cmd


class TippecanoeRunner:
    """Runs tippecanoe synchronously and reports failures as TilesError."""

    def _run(self, cmd: List[str]) -> Completed:
        try:
            result = run_with_validation(cmd, capture_output=True, check=False)
        except OSError as e:
            raise TilesError(f"Failed to spawn {TIPPECANOE}: {e}") from e
        return Completed(
            returncode=result.returncode, stdout=result.stdout, stderr=result.stderr
        )

    def is_installed(self) -> bool:
        try:
            return self._run([TIPPECANOE, "--version"]).ok
        except TilesError:
            return False

    def run(self, source: Union[str, Path], config: TilesConfig) -> Path:
        if not self.is_installed():
            raise TilesError(f"{TIPPECANOE} is not installed or not on PATH")
        cmd = build_command(source, config)
        logger.info("Running %s", " ".join(cmd))
        result = self._run(cmd)
        if not result.ok:
            message = result.stderr.decode("utf-8", errors="replace").strip()
            raise TilesError(message or f"{TIPPECANOE} exited with {result.returncode}")
        return output_path(source)
