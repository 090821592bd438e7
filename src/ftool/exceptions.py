"""ftool exceptions."""

from enum import Enum
from typing import Optional


class FtoolError(Exception):
    """Base class for all ftool errors."""


class FilterError(FtoolError):
    """A filter condition was rejected before being added."""


class UnknownColumn(FilterError):
    def __init__(self, column: str):
        super().__init__(f"Unknown column: {column}")
        self.column = column


class MissingValue(FilterError):
    def __init__(self, operator: str):
        super().__init__(f"Operator {operator} requires a value")
        self.operator = operator


class EngineErrorKind(str, Enum):
    UNREADABLE = "unreadable"
    UNSUPPORTED_FORMAT = "unsupported_format"
    CORRUPT = "corrupt"
    TIMEOUT = "timeout"
    QUERY = "query"


class EngineError(FtoolError):
    """Query engine failure carrying a human-readable message."""

    def __init__(self, kind: EngineErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return self.message


class ParseError(FtoolError):
    """JSON document could not be parsed."""

    def __init__(self, message: str, offset: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.offset = offset

    def __str__(self) -> str:
        if self.offset is None:
            return self.message
        return f"{self.message} (at byte {self.offset})"


class TilesError(FtoolError):
    """tippecanoe is missing or failed."""


__all__ = [
    "EngineError",
    "EngineErrorKind",
    "FilterError",
    "FtoolError",
    "MissingValue",
    "ParseError",
    "TilesError",
    "UnknownColumn",
]
