"""Shared fixtures: small decks built with python-pptx and a fake renderer."""
from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

import pytest
from pptx import Presentation
from pptx.util import Emu

from core.geometry import WIDESCREEN_SLIDE_HEIGHT_EMU, WIDESCREEN_SLIDE_WIDTH_EMU
from core.models import SlideRef
from core.thumbnails import create_placeholder

# Default template layouts: 0 Title Slide, 1 Title and Content, 5 Title Only, 6 Blank
DECK_LAYOUTS = [0, 1, 5, 6, 1]


@pytest.fixture
def sample_deck(tmp_path: Path) -> Path:
    """A 16:9 deck with five slides using different layouts."""
    prs = Presentation()
    prs.slide_width = Emu(WIDESCREEN_SLIDE_WIDTH_EMU)
    prs.slide_height = Emu(WIDESCREEN_SLIDE_HEIGHT_EMU)
    for number, layout_index in enumerate(DECK_LAYOUTS, start=1):
        slide = prs.slides.add_slide(prs.slide_layouts[layout_index])
        if slide.shapes.title is not None:
            slide.shapes.title.text = f"Topic {number}"

    path = tmp_path / "deck.pptx"
    prs.save(str(path))
    return path


@pytest.fixture
def slide_refs():
    def make(*numbers: int) -> List[SlideRef]:
        return [SlideRef(number=n, thumbnail=f"thumb-{n}".encode()) for n in numbers]
    return make


class FakeRenderer:
    """Stands in for SlideRenderer; records export calls."""

    instances: List["FakeRenderer"] = []

    def __init__(self, pptx_path: Path):
        self.pptx_path = pptx_path
        self.exported: List[Tuple[int, int, int]] = []
        self.closed = False
        FakeRenderer.instances.append(self)

    def __enter__(self) -> "FakeRenderer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.closed = True

    def export(self, slide_number: int, width: int, height: int) -> bytes:
        self.exported.append((slide_number, width, height))
        return create_placeholder(slide_number, 32, 18)


@pytest.fixture
def fake_renderer():
    FakeRenderer.instances = []
    yield FakeRenderer
    FakeRenderer.instances = []
