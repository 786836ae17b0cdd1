"""Custom exceptions for todo editing flows."""

from __future__ import annotations


class StateCycleError(Exception):
    """Raised when a marker cannot be cycled through any four-state set."""

    def __init__(self, message: str, *, marker: str) -> None:
        super().__init__(message)
        self.marker = marker


class TodoCompositionError(Exception):
    """Raised when a new todo line cannot be built from user input."""

    def __init__(self, message: str, *, content: str) -> None:
        super().__init__(message)
        self.content = content
