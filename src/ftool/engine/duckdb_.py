"""DuckDB query engine over a single CSV or Parquet file.

Each engine owns one in-memory connection. Column names and file paths are
quoted through the same helpers the filter builder uses.
"""

import logging
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import duckdb

from ..core.filters import ALWAYS_TRUE, Predicate, quote_identifier, quote_literal
from ..exceptions import EngineError, EngineErrorKind

logger = logging.getLogger(__name__)

READERS = {
    "csv": "read_csv_auto",
    "parquet": "read_parquet",
}

COPY_FORMATS = {
    "csv": "CSV, HEADER",
    "parquet": "PARQUET",
}

NUMERIC_TYPES = {
    "TINYINT", "SMALLINT", "INTEGER", "BIGINT", "HUGEINT",
    "UTINYINT", "USMALLINT", "UINTEGER", "UBIGINT", "UHUGEINT",
    "FLOAT", "REAL", "DOUBLE", "DECIMAL",
}

TEMPORAL_PREFIXES = ("DATE", "TIME", "TIMESTAMP")


@dataclass(frozen=True)
class SchemaEntry:
    """One column with its statistics; absent statistics are None."""

    name: str
    declared_type: str
    null_count: int = 0
    min: Optional[Any] = None
    max: Optional[Any] = None
    avg: Optional[Any] = None


def _base_type(declared_type: str) -> str:
    return declared_type.split("(", 1)[0].strip().upper()


def is_numeric(declared_type: str) -> bool:
    return _base_type(declared_type) in NUMERIC_TYPES


def is_temporal(declared_type: str) -> bool:
    return _base_type(declared_type).startswith(TEMPORAL_PREFIXES)


def source_format(path: Union[str, Path]) -> str:
    """Return ``csv`` or ``parquet`` from the file extension.

    Raises:
        EngineError: If the extension is not a supported tabular format
    """
    suffix = Path(path).suffix.lower().lstrip(".")
    if suffix not in READERS:
        shown = f".{suffix}" if suffix else "no extension"
        raise EngineError(
            EngineErrorKind.UNSUPPORTED_FORMAT,
            f"Expected .parquet or .csv file, got {shown}",
        )
    return suffix


def _translate(error: duckdb.Error, action: str) -> EngineError:
    if isinstance(error, duckdb.InterruptException):
        return EngineError(EngineErrorKind.TIMEOUT, f"{action} timed out")
    if isinstance(error, duckdb.IOException):
        return EngineError(EngineErrorKind.UNREADABLE, f"{action} failed: {error}")
    if isinstance(
        error,
        (duckdb.BinderException, duckdb.ConversionException, duckdb.ParserException),
    ):
        return EngineError(EngineErrorKind.QUERY, f"{action} failed: {error}")
    return EngineError(EngineErrorKind.CORRUPT, f"{action} failed: {error}")


class DuckDbEngine:
    """Query engine bound to one source file."""

    def __init__(self, path: Union[str, Path], timeout: Optional[float] = None):
        self.path = Path(path)
        self.format = source_format(self.path)
        if not self.path.exists():
            raise EngineError(EngineErrorKind.UNREADABLE, f"File not found: {self.path}")
        if not self.path.is_file():
            raise EngineError(EngineErrorKind.UNREADABLE, f"{self.path} is not a file")
        self.timeout = timeout
        try:
            self._conn: Optional[duckdb.DuckDBPyConnection] = duckdb.connect(":memory:")
        except duckdb.Error as e:
            raise EngineError(
                EngineErrorKind.UNREADABLE, f"Failed to open in-memory database: {e}"
            ) from e

    def __enter__(self) -> "DuckDbEngine":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    @property
    def source(self) -> str:
        return f"{READERS[self.format]}({quote_literal(str(self.path))})"

    def _execute(self, sql: str, action: str) -> Tuple[List[str], List[tuple]]:
        if self._conn is None:
            raise EngineError(EngineErrorKind.UNREADABLE, "Engine is closed")

        conn = self._conn
        timer = None
        if self.timeout:
            timer = threading.Timer(self.timeout, conn.interrupt)
            timer.daemon = True
            timer.start()

        started = time.perf_counter()
        try:
            cursor = conn.execute(sql)
            rows = cursor.fetchall()
            columns = [d[0] for d in cursor.description or []]
        except duckdb.Error as e:
            logger.warning("%s failed for %s: %s", action, self.path, e)
            raise _translate(e, action) from e
        finally:
            if timer is not None:
                timer.cancel()

        logger.debug(
            "%s on %s took %.3fs: %s", action, self.path, time.perf_counter() - started, sql
        )
        return columns, rows

    def columns(self) -> List[Tuple[str, str]]:
        """Column (name, declared type) pairs."""
        _, rows = self._execute(f"DESCRIBE SELECT * FROM {self.source}", "Reading schema")
        if not rows:
            raise EngineError(EngineErrorKind.CORRUPT, "File has no columns")
        return [(row[0], row[1]) for row in rows]

    def schema(self) -> List[SchemaEntry]:
        """Columns with null counts and min/max/avg where the type allows."""
        columns = self.columns()

        select: List[str] = []
        for name, declared_type in columns:
            col = quote_identifier(name)
            select.append(f"COUNT(*) - COUNT({col})")
            if is_numeric(declared_type):
                select.extend([f"MIN({col})", f"MAX({col})", f"ROUND(AVG({col}), 2)"])
            elif is_temporal(declared_type):
                select.extend([f"MIN({col})", f"MAX({col})"])

        _, rows = self._execute(
            f"SELECT {', '.join(select)} FROM {self.source}", "Computing statistics"
        )
        values = iter(rows[0])

        entries = []
        for name, declared_type in columns:
            null_count = int(next(values))
            low = high = avg = None
            if is_numeric(declared_type):
                low, high, avg = next(values), next(values), next(values)
            elif is_temporal(declared_type):
                low, high = next(values), next(values)
            entries.append(SchemaEntry(name, declared_type, null_count, low, high, avg))
        return entries

    def row_count(self, predicate: Predicate = ALWAYS_TRUE) -> int:
        _, rows = self._execute(
            f"SELECT COUNT(*) FROM {self.source} WHERE {predicate.sql}", "Counting rows"
        )
        return int(rows[0][0])

    def null_counts(self) -> Dict[str, int]:
        return {entry.name: entry.null_count for entry in self.schema()}

    def null_count(self, column: str) -> int:
        """Nulls in one column.

        Raises:
            EngineError: QUERY kind if the column does not exist
        """
        if column not in {name for name, _ in self.columns()}:
            raise EngineError(EngineErrorKind.QUERY, f"Invalid column name: {column}")
        col = quote_identifier(column)
        _, rows = self._execute(
            f"SELECT COUNT(*) - COUNT({col}) FROM {self.source}", "Counting nulls"
        )
        return int(rows[0][0])

    def query(
        self, predicate: Predicate = ALWAYS_TRUE, offset: int = 0, limit: int = 50
    ) -> Tuple[List[str], List[tuple]]:
        """Rows matching ``predicate`` in source order."""
        if offset < 0 or limit < 0:
            raise ValueError("offset and limit must be >= 0")
        sql = (
            f"SELECT * FROM {self.source} WHERE {predicate.sql} "
            f"LIMIT {int(limit)} OFFSET {int(offset)}"
        )
        return self._execute(sql, "Fetching rows")

    def convert(self, target_format: str) -> Path:
        """Write ``<stem>.<target_format>`` next to the source file.

        Returns the source path unchanged when it already has that format.
        """
        target_format = target_format.lower().lstrip(".")
        if target_format not in COPY_FORMATS:
            raise EngineError(
                EngineErrorKind.UNSUPPORTED_FORMAT,
                f"Target format not supported: {target_format}",
            )
        if target_format == self.format:
            return self.path

        target = self.path.with_suffix(f".{target_format}")
        sql = (
            f"COPY (SELECT * FROM {self.source}) TO {quote_literal(str(target))} "
            f"(FORMAT {COPY_FORMATS[target_format]})"
        )
        self._execute(sql, "Converting file")
        logger.info("Converted %s to %s", self.path, target)
        return target


def describe_columns(columns: Sequence[Tuple[str, str]]) -> List[str]:
    """Column pairs as aligned ``name type`` lines."""
    return [f"{name:<20} {declared_type}" for name, declared_type in columns]


__all__ = [
    "DuckDbEngine",
    "SchemaEntry",
    "describe_columns",
    "is_numeric",
    "is_temporal",
    "source_format",
]
