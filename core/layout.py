"""
Grid layout optimizer.

Chooses the column count and thumbnail size that best fill the
area of a slide left free by the title and bottom bands.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from config.defaults import FALLBACK_MAX_COLUMNS, MAX_COLUMNS

from .errors import InvalidInputError
from .models import Canvas, GridSolution, LayoutConstraints

logger = logging.getLogger(__name__)

# Absorbs float rounding when the re-solved grid fills the height exactly
_HEIGHT_TOLERANCE = 1e-9

DEFAULT_CANVAS = Canvas()
DEFAULT_CONSTRAINTS = LayoutConstraints()


@dataclass(frozen=True)
class ColumnTrial:
    """Outcome of evaluating one candidate column count."""

    columns: int
    fits: bool
    thumb_width: float
    thumb_height: float
    row_height: float

    @property
    def area(self) -> float:
        return self.thumb_width * self.thumb_height

    def to_solution(self) -> GridSolution:
        return GridSolution(
            columns=self.columns,
            thumb_width=self.thumb_width,
            thumb_height=self.thumb_height,
            row_height=self.row_height,
        )


def available_area(
    margin: float,
    canvas: Canvas = DEFAULT_CANVAS,
    constraints: LayoutConstraints = DEFAULT_CONSTRAINTS,
) -> Tuple[float, float]:
    """
    Compute the drawing area left for thumbnails and captions.

    Returns:
        Tuple of (available_width, available_height).
    """
    available_width = canvas.width - margin * 2
    available_height = canvas.height - constraints.title_height - constraints.bottom_margin
    return available_width, available_height


def try_columns(
    columns: int,
    slide_count: int,
    margin: float,
    canvas: Canvas = DEFAULT_CANVAS,
    constraints: LayoutConstraints = DEFAULT_CONSTRAINTS,
) -> ColumnTrial:
    """
    Evaluate a single column count.

    The thumbnail first takes the full column width. When the resulting
    grid is too tall, the thumbnail height is shrunk to the largest value
    the rows allow (never below the minimum height), the width follows
    the aspect ratio and is clamped back to the column width if needed.

    Args:
        columns: Candidate column count (>= 1).
        slide_count: Number of thumbnails to place.
        margin: Spacing between cells.
        canvas: Slide dimensions.
        constraints: Fixed layout bands and minimum sizes.

    Returns:
        ColumnTrial describing the sizes and whether they fit.
    """
    aspect = canvas.aspect_ratio
    available_width, available_height = available_area(margin, canvas, constraints)
    caption_height = constraints.caption_height

    column_width = (available_width - margin * (columns - 1)) / columns
    thumb_w = column_width
    thumb_h = thumb_w / aspect

    rows = math.ceil(slide_count / columns)
    row_h = thumb_h + margin + caption_height
    total_h = rows * row_h

    fits = _fits(total_h, available_height, thumb_w, thumb_h, constraints)

    if not fits and total_h > available_height:
        max_thumb_h = (available_height - rows * (caption_height + margin)) / rows
        if max_thumb_h > 0:
            thumb_h = max(constraints.min_thumb_height, max_thumb_h)
            thumb_w = thumb_h * aspect

            if thumb_w > column_width:
                thumb_w = column_width
                thumb_h = thumb_w / aspect

            row_h = thumb_h + margin + caption_height
            total_h = rows * row_h
            fits = _fits(total_h, available_height, thumb_w, thumb_h, constraints)

    return ColumnTrial(
        columns=columns,
        fits=fits,
        thumb_width=thumb_w,
        thumb_height=thumb_h,
        row_height=row_h,
    )


def _fits(
    total_height: float,
    available_height: float,
    thumb_width: float,
    thumb_height: float,
    constraints: LayoutConstraints,
) -> bool:
    return (
        total_height <= available_height + _HEIGHT_TOLERANCE
        and thumb_width >= constraints.min_thumb_width
        and thumb_height >= constraints.min_thumb_height
    )


def solve(
    slide_count: int,
    margin: float,
    desired_columns: Optional[int] = None,
    canvas: Canvas = DEFAULT_CANVAS,
    constraints: LayoutConstraints = DEFAULT_CONSTRAINTS,
) -> GridSolution:
    """
    Find the grid for `slide_count` thumbnails.

    A positive `desired_columns` wins whenever it fits. Otherwise every
    column count from 1 to MAX_COLUMNS is tried and the one giving the
    largest thumbnail area is kept (the smallest count on ties). When
    nothing fits, the single-column layout is used if it fits after
    shrinking, and a minimum-size grid of up to FALLBACK_MAX_COLUMNS
    columns otherwise. That last grid may overflow the slide.

    Args:
        slide_count: Number of thumbnails (>= 1).
        margin: Spacing between cells (>= 0).
        desired_columns: Preferred column count; None or <= 0 means unset.
        canvas: Slide dimensions.
        constraints: Fixed layout bands and minimum sizes.

    Returns:
        GridSolution for the chosen column count.

    Raises:
        InvalidInputError: If slide_count < 1 or margin < 0.
    """
    if slide_count < 1:
        raise InvalidInputError(f"Slide count must be positive, got {slide_count}")
    if margin < 0:
        raise InvalidInputError(f"Margin must not be negative, got {margin}")

    if desired_columns is not None and desired_columns > 0:
        trial = try_columns(desired_columns, slide_count, margin, canvas, constraints)
        if trial.fits:
            return trial.to_solution()
        logger.debug(f"{desired_columns} columns do not fit {slide_count} slides, searching")

    best: Optional[ColumnTrial] = None
    for columns in range(1, MAX_COLUMNS + 1):
        trial = try_columns(columns, slide_count, margin, canvas, constraints)
        if not trial.fits:
            continue
        if best is None or trial.area > best.area:
            best = trial

    if best is not None:
        return best.to_solution()

    fallback = try_columns(1, slide_count, margin, canvas, constraints)
    if fallback.fits:
        return fallback.to_solution()

    logger.warning(
        f"No grid fits {slide_count} slides on {canvas.width:g}x{canvas.height:g}, "
        "using minimum thumbnail size"
    )
    thumb_w = constraints.min_thumb_width
    thumb_h = max(constraints.min_thumb_height, constraints.min_thumb_width / canvas.aspect_ratio)
    return GridSolution(
        columns=min(FALLBACK_MAX_COLUMNS, slide_count),
        thumb_width=thumb_w,
        thumb_height=thumb_h,
        row_height=thumb_h + margin + constraints.caption_height,
    )
