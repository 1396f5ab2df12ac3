"""Exceptions raised inside the engine.

None of these escape :class:`modelctl.services.validate.ValidationService`;
they are converted to diagnostics at the file or run boundary.
"""

from __future__ import annotations


class ModelctlError(Exception):
    """Base class for modelctl errors."""


class DocumentParseError(ModelctlError):
    """Raised when a file cannot be read as YAML."""

    def __init__(self, message: str, *, line: int | None = None) -> None:
        super().__init__(message)
        self.line = line


class ValidationCancelled(ModelctlError):
    """Raised by file reads once the run's cancel event is set."""
