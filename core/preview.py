"""
Preview projection.

Turns a grid solution into positioned thumbnail cells for display,
using the same placement rules as the generated TOC slide.
"""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from config.defaults import (
    CANVAS_PADDING,
    CAPTION_LABEL,
    DEFAULT_SLIDE_HEIGHT,
    DEFAULT_SLIDE_WIDTH,
)

from .layout import DEFAULT_CANVAS, DEFAULT_CONSTRAINTS, solve
from .models import Canvas, GridSolution, LayoutConstraints, PlacedItem, SlideRef


def caption_for(slide_number: int) -> str:
    """Caption text shown under a thumbnail."""
    return CAPTION_LABEL.format(number=slide_number)


def cell_origin(
    index: int,
    solution: GridSolution,
    margin: float,
    constraints: LayoutConstraints = DEFAULT_CONSTRAINTS,
) -> Tuple[float, float]:
    """
    Top-left corner of the cell at `index`.

    Cells fill rows left to right, starting under the title band.

    Args:
        index: 0-based position in the selection.
        solution: Grid to place the cell in.
        margin: Spacing between cells, also used as the left inset.
        constraints: Layout bands (only the title height is used).

    Returns:
        Tuple of (x, y).
    """
    row = index // solution.columns
    col = index % solution.columns
    x = margin + col * (solution.thumb_width + margin)
    y = constraints.title_height + row * solution.row_height
    return x, y


def project(
    selected_slides: Sequence[SlideRef],
    columns: Optional[int] = None,
    margin: float = 20,
    canvas: Canvas = DEFAULT_CANVAS,
    constraints: LayoutConstraints = DEFAULT_CONSTRAINTS,
) -> List[PlacedItem]:
    """
    Lay out the selected slides as preview cells.

    Args:
        selected_slides: Slides in display order.
        columns: Preferred column count, None to search for the best one.
        margin: Spacing between cells.
        canvas: Slide dimensions.
        constraints: Fixed layout bands and minimum sizes.

    Returns:
        One PlacedItem per slide, in input order.
    """
    if not selected_slides:
        return []

    solution = solve(len(selected_slides), margin, columns, canvas, constraints)

    items = []
    for i, slide in enumerate(selected_slides):
        x, y = cell_origin(i, solution, margin, constraints)
        items.append(PlacedItem(
            x=x,
            y=y,
            width=solution.thumb_width,
            height=solution.thumb_height,
            caption=caption_for(slide.number),
            slide_number=slide.number,
            thumbnail=slide.thumbnail,
            caption_height=constraints.caption_height,
        ))
    return items


def calculate_canvas_size(
    items: Sequence[PlacedItem],
    padding: float = CANVAS_PADDING,
) -> Tuple[float, float]:
    """
    Smallest display surface covering every item.

    Never smaller than the default slide size.

    Returns:
        Tuple of (width, height).
    """
    if not items:
        return DEFAULT_SLIDE_WIDTH, DEFAULT_SLIDE_HEIGHT

    max_x = max(item.right for item in items)
    max_y = max(item.bottom for item in items)
    return (
        max(max_x + padding, DEFAULT_SLIDE_WIDTH),
        max(max_y + padding, DEFAULT_SLIDE_HEIGHT),
    )
