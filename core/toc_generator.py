"""
Table of contents generation.

Copies a deck next to itself and appends a slide holding a grid of
linked thumbnails of the selected slides.
"""
from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Dict, Optional, Sequence, Union

from config.defaults import (
    CAPTION_SHAPE_HEIGHT_EMU,
    EXPORT_HEIGHT,
    EXPORT_WIDTH,
    OUTPUT_SUFFIX,
)

from .errors import ContainerError, InvalidInputError
from .geometry import emu_to_pt, pt_to_emu
from .layout import DEFAULT_CONSTRAINTS
from .models import Canvas, LayoutConstraints, PlacedItem, SlideRef
from .preview import project
from .slide_builder import EmuRect, ShapeKind, TocSlideBuilder
from .thumbnails import SlideRenderer

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
RendererFactory = Callable[[Path], SlideRenderer]


def get_output_path(input_path: PathLike) -> Path:
    """
    Pick the first free TOC file name next to the input.

    Tries `<stem>_TOC<ext>`, then `<stem>_TOC(2)<ext>`, `<stem>_TOC(3)<ext>`...

    Args:
        input_path: Source deck.

    Returns:
        A path that does not exist yet.
    """
    input_path = Path(input_path)
    index = 1
    while True:
        suffix = OUTPUT_SUFFIX if index == 1 else f"{OUTPUT_SUFFIX}({index})"
        candidate = input_path.with_name(f"{input_path.stem}{suffix}{input_path.suffix}")
        if not candidate.exists():
            return candidate
        index += 1


def to_emu_rect(item: PlacedItem) -> EmuRect:
    """Convert a placed cell from points to an EMU rectangle."""
    return EmuRect(
        left=pt_to_emu(item.x),
        top=pt_to_emu(item.y),
        width=pt_to_emu(item.width),
        height=pt_to_emu(item.height),
    )


def caption_rect(thumb: EmuRect) -> EmuRect:
    """Caption box directly under a thumbnail, with a fixed height."""
    return EmuRect(
        left=thumb.left,
        top=thumb.top + thumb.height,
        width=thumb.width,
        height=CAPTION_SHAPE_HEIGHT_EMU,
    )


class TocGenerator:
    """
    Generates a deck copy with an appended table of contents slide.

    Thumbnails are rasterized by a SlideRenderer; the slide itself is
    written through TocSlideBuilder. A failure in any step aborts the
    whole run, except single-slide rendering failures which fall back
    to placeholder images.
    """

    def __init__(
        self,
        soffice_path: Optional[str] = None,
        poppler_path: Optional[str] = None,
        renderer_factory: Optional[RendererFactory] = None,
        constraints: LayoutConstraints = DEFAULT_CONSTRAINTS,
    ):
        """
        Initialize the generator.

        Args:
            soffice_path: LibreOffice executable for slide rendering.
            poppler_path: Poppler bin directory for slide rendering.
            renderer_factory: Builds the renderer for a deck path;
                defaults to SlideRenderer with the paths above.
            constraints: Layout bands and minimum sizes.
        """
        if renderer_factory is None:
            def renderer_factory(path: Path) -> SlideRenderer:
                return SlideRenderer(path, soffice_path, poppler_path)
        self._renderer_factory = renderer_factory
        self.constraints = constraints

    def create_table_of_contents(
        self,
        input_path: PathLike,
        slides: Sequence[SlideRef],
        columns: Optional[int],
        margin: float,
        background_slide_index: int,
    ) -> Path:
        """
        Write `<stem>_TOC.pptx` with a linked thumbnail grid as last slide.

        Args:
            input_path: Source deck, never modified.
            slides: Selected slides, in grid order.
            columns: Preferred column count, None to search.
            margin: Spacing between cells in points.
            background_slide_index: 0-based index of the slide whose
                layout the TOC slide inherits.

        Returns:
            Path of the written deck.

        Raises:
            InvalidInputError: On bad arguments; nothing is written.
            ContainerError: If the deck cannot be copied, opened or saved.
        """
        input_path = Path(input_path)
        self._validate(input_path, slides, margin, background_slide_index)

        output_path = get_output_path(input_path)
        try:
            shutil.copyfile(input_path, output_path)
        except OSError as e:
            raise ContainerError(f"Cannot copy {input_path} to {output_path}: {e}") from e
        logger.info(f"Copied deck to: {output_path.name}")

        temp_dir = Path(tempfile.mkdtemp(prefix="toc_thumbs_"))
        try:
            images = self._export_thumbnails(input_path, slides, temp_dir)

            with TocSlideBuilder(output_path) as builder:
                builder.new_slide_from(background_slide_index)

                width_emu, height_emu = builder.slide_size
                canvas = Canvas(emu_to_pt(width_emu), emu_to_pt(height_emu))
                items = project(slides, columns, margin, canvas, self.constraints)

                for item in items:
                    self._emit_entry(builder, item, images[item.slide_number])

                builder.save()
                link_count = len(builder.links)

            logger.info(
                f"Table of contents with {len(items)} entries and {link_count} links written"
            )
            return output_path
        finally:
            _try_delete_folder(temp_dir)

    def _validate(
        self,
        input_path: Path,
        slides: Sequence[SlideRef],
        margin: float,
        background_slide_index: int,
    ) -> None:
        if not slides:
            raise InvalidInputError("No slides selected")
        if margin < 0:
            raise InvalidInputError(f"Margin must not be negative, got {margin}")

        with TocSlideBuilder(input_path) as source:
            slide_count = source.slide_count

        if not 0 <= background_slide_index < slide_count:
            raise InvalidInputError(
                f"Background slide index {background_slide_index} out of range "
                f"(deck has {slide_count} slides)"
            )
        for slide in slides:
            if not 1 <= slide.number <= slide_count:
                raise InvalidInputError(
                    f"Slide {slide.number} does not exist (deck has {slide_count} slides)"
                )

    def _export_thumbnails(
        self,
        input_path: Path,
        slides: Sequence[SlideRef],
        temp_dir: Path,
    ) -> Dict[int, Path]:
        """Render each selected slide once to `slide_<n>.png`."""
        images: Dict[int, Path] = {}
        with self._renderer_factory(input_path) as renderer:
            for slide in slides:
                if slide.number in images:
                    continue
                image_path = temp_dir / f"slide_{slide.number}.png"
                image_path.write_bytes(
                    renderer.export(slide.number, EXPORT_WIDTH, EXPORT_HEIGHT)
                )
                images[slide.number] = image_path
                logger.debug(f"Exported slide {slide.number}")
        return images

    @staticmethod
    def _emit_entry(builder: TocSlideBuilder, item: PlacedItem, image_path: Path) -> None:
        number = item.slide_number
        thumb = to_emu_rect(item)

        builder.add_shape(ShapeKind.FRAME, thumb, name=f"Frame {number}")
        builder.add_shape(
            ShapeKind.PICTURE, thumb,
            content=image_path, link=number, name=f"Slide {number}",
        )
        builder.add_shape(
            ShapeKind.CAPTION, caption_rect(thumb),
            content=item.caption, link=number, name=f"Caption {number}",
        )


def _try_delete_folder(path: Path) -> None:
    try:
        if path.exists():
            shutil.rmtree(path)
    except OSError as e:
        logger.warning(f"Could not remove temporary folder {path}: {e}")
