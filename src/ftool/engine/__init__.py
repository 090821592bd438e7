"""Collaborators: query engine, filesystem, JSON parser and tippecanoe."""

from .duckdb_ import DuckDbEngine, SchemaEntry, source_format
from .filesystem import DirEntry, FileMeta, LocalFilesystem, file_kind
from .parser import JsonParser
from .tippecanoe import Preset, TilesConfig, TippecanoeRunner

__all__ = [
    "DirEntry",
    "DuckDbEngine",
    "FileMeta",
    "JsonParser",
    "LocalFilesystem",
    "Preset",
    "SchemaEntry",
    "TilesConfig",
    "TippecanoeRunner",
    "file_kind",
    "source_format",
]
