"""Displayable messages shown over a screen."""

from __future__ import annotations

from pydantic import BaseModel


class Notice(BaseModel):
    """Message popup: an error or a success report."""

    title: str
    body: str
    is_error: bool = False

    @classmethod
    def error(cls, exc: Exception | str) -> "Notice":
        return cls(title="Error", body=str(exc), is_error=True)

    @classmethod
    def success(cls, body: str) -> "Notice":
        return cls(title="Success", body=body)

    def __str__(self) -> str:
        return f"{self.title}: {self.body}"
