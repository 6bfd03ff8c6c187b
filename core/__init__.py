"""
Core business logic package.

Contains grid layout, preview projection, slide rendering and
TOC slide generation modules.
"""
from .errors import ContainerError, InvalidInputError, RenderingError, TocBuilderError
from .geometry import (
    EMU_PER_POINT,
    emu_to_pt,
    get_aspect_ratio,
    pt_to_emu,
)
from .layout import ColumnTrial, solve, try_columns
from .models import Canvas, GridSolution, LayoutConstraints, PlacedItem, SlideRef
from .preview import calculate_canvas_size, project
from .slide_builder import EmuRect, NavigationLink, ShapeKind, TocSlideBuilder
from .thumbnails import SlideRenderer, ThumbnailService, create_placeholder, get_native_slide_size
from .toc_generator import TocGenerator, get_output_path

__all__ = [
    # Errors
    "TocBuilderError",
    "InvalidInputError",
    "RenderingError",
    "ContainerError",
    # Geometry
    "pt_to_emu",
    "emu_to_pt",
    "get_aspect_ratio",
    "EMU_PER_POINT",
    # Models
    "Canvas",
    "LayoutConstraints",
    "GridSolution",
    "SlideRef",
    "PlacedItem",
    # Layout
    "solve",
    "try_columns",
    "ColumnTrial",
    "project",
    "calculate_canvas_size",
    # Rendering
    "SlideRenderer",
    "ThumbnailService",
    "create_placeholder",
    "get_native_slide_size",
    # Generation
    "TocSlideBuilder",
    "ShapeKind",
    "EmuRect",
    "NavigationLink",
    "TocGenerator",
    "get_output_path",
]
