"""Exceptions raised by the TOC layout and generation pipeline."""
from __future__ import annotations


class TocBuilderError(Exception):
    """Base class for all TOC builder errors."""


class InvalidInputError(TocBuilderError, ValueError):
    """Raised when caller-supplied arguments are out of range.

    Always raised before any output file is written.
    """


class RenderingError(TocBuilderError):
    """Raised when a single slide cannot be rasterized."""

    def __init__(self, slide_number: int, reason: str):
        self.slide_number = slide_number
        self.reason = reason
        super().__init__(f"Failed to render slide {slide_number}: {reason}")


class ContainerError(TocBuilderError, IOError):
    """Raised when the presentation package cannot be copied, opened or saved."""
