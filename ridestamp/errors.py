"""Central error types used across the application."""

from __future__ import annotations


class LoadError(RuntimeError):
    """Raised when a track file cannot be read or parsed."""


class TemplateParseError(RuntimeError):
    """Raised when template markup is malformed beyond recovery."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        self.line = line
        self.column = column
        if line is not None and column is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


class MapRenderError(RuntimeError):
    """Raised when the track map image cannot be produced."""


__all__ = [
    "LoadError",
    "TemplateParseError",
    "MapRenderError",
]
