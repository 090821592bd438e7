"""Pydantic models for settings, notices and subprocess results."""

from .notice import Notice
from .process import Completed
from .settings import Settings

__all__ = ["Completed", "Notice", "Settings"]
