"""
PowerPoint TOC slide builder.

Appends a slide to an existing PPTX package and emits the frame,
picture and caption shapes of the table of contents, each bound to
a slide-jump link.
"""
from __future__ import annotations

import io
import logging
import zipfile
from enum import Enum
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional, Tuple, Union

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.shapes import MSO_SHAPE
from pptx.exc import PackageNotFoundError
from pptx.opc.constants import RELATIONSHIP_TYPE as RT
from pptx.util import Emu

from config.defaults import (
    CAPTION_ID_BASE,
    DEFAULT_SLIDE_HEIGHT,
    DEFAULT_SLIDE_WIDTH,
    FRAME_ID_BASE,
    FRAME_LINE_COLOR,
    PICTURE_ID_BASE,
)

from .errors import ContainerError, InvalidInputError
from .geometry import pt_to_emu

logger = logging.getLogger(__name__)

SLIDE_JUMP_ACTION = "ppaction://hlinksldjump"


class ShapeKind(Enum):
    """Shapes emitted per TOC entry, in stacking order."""

    FRAME = "frame"
    PICTURE = "picture"
    CAPTION = "caption"


SHAPE_ID_BASES: Dict[ShapeKind, int] = {
    ShapeKind.FRAME: FRAME_ID_BASE,
    ShapeKind.PICTURE: PICTURE_ID_BASE,
    ShapeKind.CAPTION: CAPTION_ID_BASE,
}


class NavigationLink(NamedTuple):
    """A click target persisted in the package: shape to slide via a relationship."""

    shape_id: int
    target_slide_id: int
    r_id: str


class EmuRect(NamedTuple):
    """Shape position and size in EMU."""

    left: int
    top: int
    width: int
    height: int


ImageSource = Union[str, Path, bytes]


class TocSlideBuilder:
    """
    Builds the TOC slide inside a copy of the source deck.

    Holds the package open between open() and close(); use it as a
    context manager so the package is released on every path.

    Shape ids come from one numeric range per shape kind, so the
    generated shapes never collide with each other or with the
    handful of ids a fresh slide uses.
    """

    def __init__(self, pptx_path: Union[str, Path]):
        """
        Initialize the builder.

        Args:
            pptx_path: Package to modify in place.
        """
        self.pptx_path = Path(pptx_path)
        self.prs: Optional[Presentation] = None
        self.slide = None
        self._shape_counts: Dict[ShapeKind, int] = {kind: 0 for kind in ShapeKind}
        self.links: List[NavigationLink] = []

    def __enter__(self) -> "TocSlideBuilder":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> None:
        """
        Load the package.

        Raises:
            ContainerError: If the file is missing or not a valid PPTX.
        """
        try:
            self.prs = Presentation(str(self.pptx_path))
        except (PackageNotFoundError, zipfile.BadZipFile, KeyError, OSError) as e:
            raise ContainerError(f"Cannot open presentation {self.pptx_path}: {e}") from e
        logger.debug(f"Opened {self.pptx_path} ({self.slide_count} slides)")

    def close(self) -> None:
        """Release the package without saving."""
        self.prs = None
        self.slide = None

    @property
    def slide_count(self) -> int:
        """Number of slides, the TOC slide included once created."""
        return len(self._require_presentation().slides)

    @property
    def slide_ids(self) -> List[int]:
        """Slide ids in presentation order."""
        return [slide.slide_id for slide in self._require_presentation().slides]

    @property
    def slide_size(self) -> Tuple[int, int]:
        """Slide (width, height) in EMU."""
        prs = self._require_presentation()
        if prs.slide_width is None or prs.slide_height is None:
            return pt_to_emu(DEFAULT_SLIDE_WIDTH), pt_to_emu(DEFAULT_SLIDE_HEIGHT)
        return int(prs.slide_width), int(prs.slide_height)

    def new_slide_from(self, background_index: int):
        """
        Append an empty slide that uses the layout of an existing slide.

        Args:
            background_index: 0-based index of the slide whose layout
                (and therefore master and background) is inherited.

        Returns:
            The new python-pptx slide.

        Raises:
            InvalidInputError: If background_index is out of range.
        """
        prs = self._require_presentation()
        if not 0 <= background_index < len(prs.slides):
            raise InvalidInputError(
                f"Background slide index {background_index} out of range "
                f"(0..{len(prs.slides) - 1})"
            )

        layout = prs.slides[background_index].slide_layout
        slide = prs.slides.add_slide(layout)

        # Start from an empty shape tree
        for placeholder in list(slide.placeholders):
            placeholder.element.getparent().remove(placeholder.element)

        self.slide = slide
        logger.info(
            f"TOC slide created with layout '{layout.name}' "
            f"(slide id {slide.slide_id})"
        )
        return slide

    def add_shape(
        self,
        kind: ShapeKind,
        geometry: EmuRect,
        content: Optional[Union[str, ImageSource]] = None,
        link: Optional[int] = None,
        name: Optional[str] = None,
    ):
        """
        Add one shape to the TOC slide.

        Args:
            kind: Shape kind.
            geometry: Position and size in EMU.
            content: Image file path or PNG bytes for pictures, caption
                text for captions, ignored for frames.
            link: 1-based number of the slide a click jumps to.
            name: Shape name shown in the selection pane.

        Returns:
            The new python-pptx shape.

        Raises:
            RuntimeError: If no TOC slide has been created.
            InvalidInputError: If the link target does not exist.
        """
        if self.slide is None:
            raise RuntimeError("TOC slide not created. Call new_slide_from() first.")

        target = self._target_slide(link) if link is not None else None
        left, top, width, height = (Emu(v) for v in geometry)

        if kind is ShapeKind.FRAME:
            shape = self.slide.shapes.add_shape(MSO_SHAPE.RECTANGLE, left, top, width, height)
            shape.fill.background()
            shape.line.color.rgb = RGBColor.from_string(FRAME_LINE_COLOR)
        elif kind is ShapeKind.PICTURE:
            if content is None:
                raise ValueError("Picture shapes need image content")
            image = io.BytesIO(content) if isinstance(content, bytes) else str(content)
            # Explicit width and height stretch the image over the rectangle
            shape = self.slide.shapes.add_picture(image, left, top, width, height)
            if target is not None:
                shape.click_action.target_slide = target
        else:
            shape = self.slide.shapes.add_textbox(left, top, width, height)
            text_frame = shape.text_frame
            text_frame.word_wrap = True
            run = text_frame.paragraphs[0].add_run()
            run.text = str(content or "")
            if target is not None:
                self._link_run(run, target)

        index = self._shape_counts[kind]
        self._shape_counts[kind] = index + 1
        shape_id = SHAPE_ID_BASES[kind] + index
        self._set_shape_id(shape, shape_id)
        if name:
            shape.name = name
        if target is not None:
            # relate_to reuses the relationship created by the click action
            r_id = self.slide.part.relate_to(target.part, RT.SLIDE)
            self.links.append(NavigationLink(shape_id, target.slide_id, r_id))

        return shape

    def save(self) -> None:
        """
        Save the package back to its path.

        Raises:
            ContainerError: If the file cannot be written.
        """
        prs = self._require_presentation()
        try:
            prs.save(str(self.pptx_path))
            logger.info(f"Presentation saved to: {self.pptx_path}")
        except (OSError, ValueError) as e:
            logger.error(f"Failed to save presentation: {e}")
            raise ContainerError(f"Failed to save presentation: {e}") from e

    def _require_presentation(self) -> Presentation:
        if self.prs is None:
            raise RuntimeError("Presentation not opened. Call open() first.")
        return self.prs

    def _target_slide(self, number: int):
        slides = self._require_presentation().slides
        # The TOC slide itself is last and never a target
        last_source = len(slides) - 1 if self.slide is not None else len(slides)
        if not 1 <= number <= last_source:
            raise InvalidInputError(f"Link target slide {number} does not exist")
        return slides[number - 1]

    def _link_run(self, run, target) -> None:
        """Attach a slide-jump hyperlink to a text run."""
        r_id = self.slide.part.relate_to(target.part, RT.SLIDE)
        rPr = run._r.get_or_add_rPr()
        hlink = rPr.add_hlinkClick(r_id)
        hlink.set("action", SLIDE_JUMP_ACTION)

    @staticmethod
    def _set_shape_id(shape, shape_id: int) -> None:
        cNvPr = shape.element.xpath("./*[1]/p:cNvPr")[0]
        cNvPr.set("id", str(shape_id))
