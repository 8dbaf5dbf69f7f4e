"""Structured parsing errors for source table extraction."""

from __future__ import annotations
from typing import Any


class ParsingError(Exception):
    """Base class for parsing related issues."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class UnrecognizedTableError(ParsingError):
    """Raised when a table's shape matches none of the known layouts."""


class MissingColumnError(ParsingError):
    """Raised when a classified table lacks a column its shape requires."""
