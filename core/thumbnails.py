"""
Slide rendering module.

Rasterizes slides of a PPTX file by converting the deck to PDF with
LibreOffice and rendering single pages with pdf2image (Poppler).
Slides that cannot be rendered get a generated placeholder image.
"""
from __future__ import annotations

import io
import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional, Tuple, Union

from pdf2image import convert_from_path
from pdf2image.exceptions import (
    PDFInfoNotInstalledError,
    PDFPageCountError,
    PDFSyntaxError,
)
from PIL import Image, ImageDraw, ImageFont
from pptx import Presentation
from pptx.exc import PackageNotFoundError

from config.defaults import (
    CAPTION_LABEL,
    DEFAULT_SLIDE_HEIGHT,
    DEFAULT_SLIDE_WIDTH,
    PLACEHOLDER_COLOR,
    PLACEHOLDER_FONT_SIZE,
    PLACEHOLDER_TEXT_COLOR,
    PREVIEW_WIDTH,
    SOFFICE_TIMEOUT_SEC,
)

from .errors import RenderingError
from .geometry import get_aspect_ratio, pt_to_emu, size_for_width
from .models import SlideRef
from .slide_builder import TocSlideBuilder

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Hidden slides are exported too so PDF page N is always slide N
PDF_EXPORT_FILTER = (
    'pdf:impress_pdf_Export:'
    '{"ExportHiddenSlides":{"type":"boolean","value":"true"}}'
)


def create_placeholder(slide_number: int, width: int, height: int) -> bytes:
    """
    Create a grey PNG labelled with the slide number.

    Args:
        slide_number: Number drawn in the top-left corner.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        PNG bytes.
    """
    image = Image.new("RGB", (width, height), PLACEHOLDER_COLOR)
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default(size=PLACEHOLDER_FONT_SIZE)
    draw.text(
        (10, 10),
        CAPTION_LABEL.format(number=slide_number),
        fill=PLACEHOLDER_TEXT_COLOR,
        font=font,
    )

    stream = io.BytesIO()
    image.save(stream, format="PNG")
    return stream.getvalue()


def get_native_slide_size(pptx_path: PathLike) -> Tuple[int, int]:
    """
    Read the slide size of a deck in EMU.

    Falls back to the default 16:9 size when the file cannot be read
    or does not declare a size.

    Args:
        pptx_path: Path to the PPTX file.

    Returns:
        Tuple of (width_emu, height_emu).
    """
    try:
        prs = Presentation(str(pptx_path))
        if prs.slide_width and prs.slide_height:
            return int(prs.slide_width), int(prs.slide_height)
    except (PackageNotFoundError, KeyError, ValueError, OSError) as e:
        logger.warning(f"Could not read slide size of {pptx_path}: {e}")

    return pt_to_emu(DEFAULT_SLIDE_WIDTH), pt_to_emu(DEFAULT_SLIDE_HEIGHT)


class SlideRenderer:
    """
    Renders individual slides of a deck to PNG.

    The deck is converted to PDF once, on first use, inside a private
    temporary directory that is removed by close().

    Example:
        ```python
        with SlideRenderer("deck.pptx", soffice_path="soffice") as renderer:
            png = renderer.export(3, 1600, 900)
        ```
    """

    def __init__(
        self,
        pptx_path: PathLike,
        soffice_path: Optional[str] = None,
        poppler_path: Optional[str] = None,
    ):
        """
        Initialize the renderer.

        Args:
            pptx_path: Deck to render.
            soffice_path: LibreOffice executable (default: "soffice" on PATH).
            poppler_path: Poppler bin directory (default: PATH).
        """
        self.pptx_path = Path(pptx_path)
        self.soffice_path = soffice_path or "soffice"
        self.poppler_path = poppler_path or None
        self._work_dir: Optional[Path] = None
        self._pdf_path: Optional[Path] = None
        self._conversion_failed = False

    def __enter__(self) -> "SlideRenderer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def export(self, slide_number: int, width: int, height: int) -> bytes:
        """
        Render one slide.

        Never raises for rendering problems: a placeholder labelled with
        the slide number is returned instead.

        Args:
            slide_number: 1-based slide number.
            width: Target width in pixels.
            height: Target height in pixels.

        Returns:
            PNG bytes.
        """
        try:
            return self._render_page(slide_number, width, height)
        except RenderingError as e:
            logger.warning(f"{e} - using placeholder")
            return create_placeholder(slide_number, width, height)

    def close(self) -> None:
        """Remove the intermediate PDF and LibreOffice profile."""
        if self._work_dir is not None:
            shutil.rmtree(self._work_dir, ignore_errors=True)
            self._work_dir = None
            self._pdf_path = None

    def _render_page(self, slide_number: int, width: int, height: int) -> bytes:
        pdf_path = self._ensure_pdf(slide_number)

        try:
            images = convert_from_path(
                str(pdf_path),
                first_page=slide_number,
                last_page=slide_number,
                size=(width, height),
                poppler_path=self.poppler_path,
            )
        except (PDFInfoNotInstalledError, PDFPageCountError, PDFSyntaxError, OSError) as e:
            raise RenderingError(slide_number, str(e)) from e

        if not images:
            raise RenderingError(slide_number, "page not found in PDF export")

        stream = io.BytesIO()
        images[0].save(stream, format="PNG")
        return stream.getvalue()

    def _ensure_pdf(self, slide_number: int) -> Path:
        """Convert the deck to PDF once, remembering a failed conversion."""
        if self._pdf_path is not None:
            return self._pdf_path
        if self._conversion_failed:
            raise RenderingError(slide_number, "PDF conversion failed earlier")

        self._work_dir = Path(tempfile.mkdtemp(prefix="toc_render_"))
        profile_dir = self._work_dir / "profile"
        command = [
            self.soffice_path,
            f"-env:UserInstallation={profile_dir.as_uri()}",
            "--headless",
            "--convert-to", PDF_EXPORT_FILTER,
            "--outdir", str(self._work_dir),
            str(self.pptx_path),
        ]
        logger.info(f"Converting {self.pptx_path.name} to PDF...")

        try:
            subprocess.run(
                command,
                check=True,
                capture_output=True,
                timeout=SOFFICE_TIMEOUT_SEC,
            )
        except (OSError, subprocess.SubprocessError) as e:
            self._conversion_failed = True
            logger.error(f"LibreOffice conversion failed: {e}")
            raise RenderingError(slide_number, "PDF conversion failed") from e

        pdf_path = self._work_dir / (self.pptx_path.stem + ".pdf")
        if not pdf_path.exists():
            self._conversion_failed = True
            raise RenderingError(slide_number, "LibreOffice produced no PDF")

        self._pdf_path = pdf_path
        return pdf_path


class ThumbnailService:
    """Loads the slide list of a deck with preview thumbnails."""

    def __init__(
        self,
        soffice_path: Optional[str] = None,
        poppler_path: Optional[str] = None,
        preview_width: int = PREVIEW_WIDTH,
    ):
        self.soffice_path = soffice_path
        self.poppler_path = poppler_path
        self.preview_width = preview_width

    def get_slides(self, pptx_path: PathLike) -> List[SlideRef]:
        """
        Render every slide of a deck at preview resolution.

        Args:
            pptx_path: Deck to load.

        Returns:
            One selected SlideRef per slide, numbered from 1.

        Raises:
            ContainerError: If the file is missing or not a valid PPTX.
        """
        pptx_path = Path(pptx_path)
        with TocSlideBuilder(pptx_path) as deck:
            slide_count = deck.slide_count
            width_emu, height_emu = deck.slide_size
        aspect = get_aspect_ratio(width_emu, height_emu)
        width, height = size_for_width(self.preview_width * 2, aspect)

        logger.info(f"Loading {slide_count} slides from {pptx_path.name}")
        slides = []
        with SlideRenderer(pptx_path, self.soffice_path, self.poppler_path) as renderer:
            for number in range(1, slide_count + 1):
                slides.append(SlideRef(
                    number=number,
                    is_selected=True,
                    thumbnail=renderer.export(number, width, height),
                ))
        return slides
