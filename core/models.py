"""
Value types shared by the layout optimizer, the preview projector
and the TOC generator.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from config.defaults import (
    BOTTOM_MARGIN,
    CAPTION_HEIGHT,
    DEFAULT_SLIDE_HEIGHT,
    DEFAULT_SLIDE_WIDTH,
    MIN_THUMB_HEIGHT,
    MIN_THUMB_WIDTH,
    TITLE_HEIGHT,
)

from .errors import InvalidInputError


@dataclass(frozen=True)
class Canvas:
    """Slide area the TOC grid is laid out on, in points."""

    width: float = DEFAULT_SLIDE_WIDTH
    height: float = DEFAULT_SLIDE_HEIGHT

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise InvalidInputError(
                f"Canvas dimensions must be positive, got {self.width}x{self.height}"
            )

    @property
    def aspect_ratio(self) -> float:
        """Width / height."""
        return self.width / self.height


@dataclass(frozen=True)
class LayoutConstraints:
    """Fixed bands and minimum thumbnail size used by the optimizer."""

    title_height: float = TITLE_HEIGHT
    bottom_margin: float = BOTTOM_MARGIN
    caption_height: float = CAPTION_HEIGHT
    min_thumb_width: float = MIN_THUMB_WIDTH
    min_thumb_height: float = MIN_THUMB_HEIGHT


@dataclass(frozen=True)
class GridSolution:
    """Column count and thumbnail size chosen for a TOC grid."""

    columns: int
    thumb_width: float
    thumb_height: float
    row_height: float

    @property
    def thumb_area(self) -> float:
        return self.thumb_width * self.thumb_height


@dataclass
class SlideRef:
    """A slide of the source deck as seen by the caller's slide list."""

    number: int  # 1-based ordinal in the source deck
    is_selected: bool = True
    thumbnail: Optional[bytes] = None  # PNG bytes


@dataclass
class PlacedItem:
    """One thumbnail cell positioned on the canvas."""

    x: float
    y: float
    width: float
    height: float
    caption: str
    slide_number: int
    thumbnail: Optional[bytes] = None
    caption_height: float = CAPTION_HEIGHT

    @property
    def right(self) -> float:
        """Right edge coordinate."""
        return self.x + self.width

    @property
    def bottom(self) -> float:
        """Bottom edge coordinate, caption included."""
        return self.y + self.height + self.caption_height
