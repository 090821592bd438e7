"""Local filesystem collaborator: directory listings and raw file reads."""

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from itertools import islice
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger(__name__)

TABULAR_EXTENSIONS = {"csv", "parquet"}
JSON_EXTENSIONS = {"json", "geojson"}


@dataclass(frozen=True)
class DirEntry:
    name: str
    path: Path
    is_dir: bool
    size: int = 0
    modified: Optional[datetime] = None

    @property
    def is_parent(self) -> bool:
        return self.name == ".."


@dataclass(frozen=True)
class FileMeta:
    size: int
    modified: Optional[datetime]
    kind: str
    readonly: bool


def file_kind(path: Union[str, Path]) -> str:
    """Classify a path as ``tabular``, ``json`` or ``other`` by extension."""
    suffix = Path(path).suffix.lower().lstrip(".")
    if suffix in TABULAR_EXTENSIONS:
        return "tabular"
    if suffix in JSON_EXTENSIONS:
        return "json"
    return "other"


def _validate_file(path: Path) -> None:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if not path.is_file():
        raise IsADirectoryError(f"{path} is not a file")


class LocalFilesystem:
    """Reads the local disk. All methods raise ``OSError`` subclasses."""

    def __init__(self, show_hidden: bool = False):
        self.show_hidden = show_hidden

    def list_dir(self, path: Union[str, Path]) -> List[DirEntry]:
        """List ``path``: ``..`` first, then directories, then files.

        Names sort case-insensitively within each group.
        """
        path = Path(path)
        entries: List[DirEntry] = []
        if path.parent != path:
            entries.append(DirEntry("..", path.parent, True))

        children: List[DirEntry] = []
        with os.scandir(path) as it:
            for item in it:
                if not self.show_hidden and item.name.startswith("."):
                    continue
                try:
                    stat = item.stat()
                    is_dir = item.is_dir()
                except OSError as e:
                    logger.debug("Skipping %s: %s", item.path, e)
                    continue
                children.append(
                    DirEntry(
                        name=item.name,
                        path=Path(item.path),
                        is_dir=is_dir,
                        size=0 if is_dir else stat.st_size,
                        modified=datetime.fromtimestamp(stat.st_mtime),
                    )
                )

        children.sort(key=lambda e: (not e.is_dir, e.name.lower()))
        entries.extend(children)
        return entries

    def read_head(self, path: Union[str, Path], n_lines: int) -> List[str]:
        path = Path(path)
        _validate_file(path)
        with path.open("r", encoding="utf-8", errors="replace") as f:
            return [line.rstrip("\r\n") for line in islice(f, n_lines)]

    def line_count(self, path: Union[str, Path]) -> int:
        path = Path(path)
        _validate_file(path)
        with path.open("rb") as f:
            return sum(1 for _ in f)

    def read_bytes(self, path: Union[str, Path]) -> bytes:
        path = Path(path)
        _validate_file(path)
        return path.read_bytes()

    def metadata(self, path: Union[str, Path]) -> FileMeta:
        path = Path(path)
        stat = path.stat()
        return FileMeta(
            size=stat.st_size,
            modified=datetime.fromtimestamp(stat.st_mtime),
            kind="directory" if path.is_dir() else file_kind(path),
            readonly=not os.access(path, os.W_OK),
        )
