"""Result of an external program run."""

from __future__ import annotations

from pydantic import BaseModel


class Completed(BaseModel):
    """Result of a subprocess execution."""

    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0
