"""Exception types raised at the I/O edges of the toolkit."""

from __future__ import annotations


class CsvValidationError(ValueError):
    """Raised when an uploaded price CSV cannot be turned into returns."""


class CommentaryError(RuntimeError):
    """Raised when the commentary service cannot produce text."""
