"""Exceptions raised by the tag engine."""

from __future__ import annotations


class TagError(Exception):
    """Base exception for tag persistence and editing."""


class UnsupportedFormatError(TagError):
    """Raised when an image format cannot carry embedded tags."""


class TagWriteError(TagError):
    """Raised when tags could not be written to an image file."""


class InvalidTagError(TagError, ValueError):
    """Raised when a tag cannot be stored (e.g. it contains the separator)."""
