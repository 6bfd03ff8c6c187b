"""
Coordinate conversion utilities.

Converts between layout points and PowerPoint EMUs
(English Metric Units).
"""
from __future__ import annotations

from typing import Tuple

# Constants
EMU_PER_INCH = 914400  # 1 inch = 914400 EMU
POINTS_PER_INCH = 72
EMU_PER_POINT = EMU_PER_INCH // POINTS_PER_INCH  # 12700

# Standard 16:9 slide dimensions (for reference)
WIDESCREEN_SLIDE_WIDTH_EMU = 12192000   # 13.333 inches
WIDESCREEN_SLIDE_HEIGHT_EMU = 6858000   # 7.5 inches


def pt_to_emu(points: float) -> int:
    """
    Convert points to EMU.

    Args:
        points: Length in points.

    Returns:
        EMU value as integer (truncated).

    Example:
        >>> pt_to_emu(72)  # 1 inch
        914400
    """
    return int(points * EMU_PER_POINT)


def emu_to_pt(emu: int) -> float:
    """
    Convert EMU to points.

    Args:
        emu: EMU value.

    Returns:
        Length in points.
    """
    return emu / EMU_PER_POINT


def size_for_width(width: int, aspect_ratio: float) -> Tuple[int, int]:
    """
    Compute an integer raster size for a given width and aspect ratio.

    Args:
        width: Target width in pixels.
        aspect_ratio: Width / height.

    Returns:
        Tuple of (width, height), height at least 1.
    """
    return (width, max(1, round(width / aspect_ratio)))


def get_aspect_ratio(width: float, height: float) -> float:
    """
    Calculate aspect ratio (width / height).

    Args:
        width: Width value.
        height: Height value.

    Returns:
        Aspect ratio as float.

    Raises:
        ValueError: If height is zero.
    """
    if height == 0:
        raise ValueError("Height cannot be zero")
    return width / height
