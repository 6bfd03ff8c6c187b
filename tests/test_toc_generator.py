from __future__ import annotations

from pathlib import Path

import pytest
from pptx import Presentation

import core.toc_generator
from config.defaults import (
    CAPTION_SHAPE_HEIGHT_EMU,
    EXPORT_HEIGHT,
    EXPORT_WIDTH,
    TITLE_HEIGHT,
)
from core.errors import ContainerError, InvalidInputError
from core.geometry import pt_to_emu
from core.slide_builder import SLIDE_JUMP_ACTION, TocSlideBuilder
from core.models import Canvas
from core.preview import project
from core.toc_generator import TocGenerator, get_output_path, to_emu_rect


@pytest.fixture
def generator(fake_renderer) -> TocGenerator:
    return TocGenerator(renderer_factory=fake_renderer)


@pytest.fixture
def temp_dir(tmp_path: Path, monkeypatch) -> Path:
    """Pin the thumbnail folder so tests can check it is removed."""
    folder = tmp_path / "thumbs"

    def mkdtemp(prefix: str = "") -> str:
        folder.mkdir()
        return str(folder)

    monkeypatch.setattr(core.toc_generator.tempfile, "mkdtemp", mkdtemp)
    return folder


def toc_files(folder: Path):
    return sorted(p.name for p in folder.glob("*_TOC*"))


class TestOutputPath:
    def test_first_candidate(self, tmp_path: Path) -> None:
        assert get_output_path(tmp_path / "talk.pptx") == tmp_path / "talk_TOC.pptx"

    def test_skips_existing_file(self, tmp_path: Path) -> None:
        (tmp_path / "talk_TOC.pptx").touch()

        first = get_output_path(tmp_path / "talk.pptx")
        second = get_output_path(tmp_path / "talk.pptx")

        assert first == second == tmp_path / "talk_TOC(2).pptx"

    def test_counts_up(self, tmp_path: Path) -> None:
        (tmp_path / "talk_TOC.pptx").touch()
        (tmp_path / "talk_TOC(2).pptx").touch()

        assert get_output_path(tmp_path / "talk.pptx") == tmp_path / "talk_TOC(3).pptx"


class TestValidation:
    @pytest.mark.parametrize("index", [-1, 5, 99])
    def test_background_index_out_of_range(
        self, generator, sample_deck, slide_refs, fake_renderer, index
    ) -> None:
        with pytest.raises(InvalidInputError):
            generator.create_table_of_contents(sample_deck, slide_refs(1, 2), 3, 20, index)

        assert toc_files(sample_deck.parent) == []
        assert fake_renderer.instances == []

    def test_unknown_slide_number(self, generator, sample_deck, slide_refs) -> None:
        with pytest.raises(InvalidInputError):
            generator.create_table_of_contents(sample_deck, slide_refs(1, 6), 3, 20, 0)

        assert toc_files(sample_deck.parent) == []

    def test_empty_selection(self, generator, sample_deck) -> None:
        with pytest.raises(InvalidInputError):
            generator.create_table_of_contents(sample_deck, [], 3, 20, 0)

    def test_negative_margin(self, generator, sample_deck, slide_refs) -> None:
        with pytest.raises(InvalidInputError):
            generator.create_table_of_contents(sample_deck, slide_refs(1), 3, -5, 0)

    def test_missing_source(self, generator, tmp_path, slide_refs) -> None:
        with pytest.raises(ContainerError):
            generator.create_table_of_contents(tmp_path / "nope.pptx", slide_refs(1), 3, 20, 0)


class TestGeneration:
    def test_appends_toc_slide_to_copy(self, generator, sample_deck, slide_refs, temp_dir) -> None:
        original = sample_deck.read_bytes()

        output = generator.create_table_of_contents(sample_deck, slide_refs(2, 4, 5), None, 20, 2)

        assert output == sample_deck.parent / "deck_TOC.pptx"
        assert sample_deck.read_bytes() == original

        prs = Presentation(str(output))
        slides = list(prs.slides)
        assert len(slides) == 6
        toc = slides[-1]
        assert toc.slide_id > max(slide.slide_id for slide in slides[:-1])
        assert toc.slide_layout.name == slides[2].slide_layout.name
        assert len(toc.placeholders) == 0
        assert not temp_dir.exists()

    def test_shapes_ids_and_order(self, generator, sample_deck, slide_refs, temp_dir) -> None:
        output = generator.create_table_of_contents(sample_deck, slide_refs(1, 3), None, 20, 0)

        toc = list(Presentation(str(output)).slides)[-1]
        ids = [shape.shape_id for shape in toc.shapes]
        names = [shape.name for shape in toc.shapes]

        assert ids == [3000, 2000, 4000, 3001, 2001, 4001]
        assert names == [
            "Frame 1", "Slide 1", "Caption 1",
            "Frame 3", "Slide 3", "Caption 3",
        ]

    def test_thumbnails_link_to_their_slides(
        self, generator, sample_deck, slide_refs, temp_dir
    ) -> None:
        output = generator.create_table_of_contents(sample_deck, slide_refs(4, 2), None, 20, 0)

        slides = list(Presentation(str(output)).slides)
        toc = slides[-1]
        pictures = [shape for shape in toc.shapes if shape.name.startswith("Slide ")]

        assert [pic.click_action.target_slide.slide_id for pic in pictures] == [
            slides[3].slide_id,
            slides[1].slide_id,
        ]

    def test_caption_runs_link_to_their_slides(
        self, generator, sample_deck, slide_refs, temp_dir
    ) -> None:
        output = generator.create_table_of_contents(sample_deck, slide_refs(5), None, 20, 0)

        slides = list(Presentation(str(output)).slides)
        toc = slides[-1]
        caption = next(shape for shape in toc.shapes if shape.name == "Caption 5")
        run = caption.text_frame.paragraphs[0].runs[0]
        hlink = run._r.rPr.hlinkClick

        assert run.text == "Slide 5"
        assert hlink.get("action") == SLIDE_JUMP_ACTION
        assert toc.part.related_part(hlink.rId) is slides[4].part

    def test_geometry_matches_layout(self, generator, sample_deck, slide_refs, temp_dir) -> None:
        output = generator.create_table_of_contents(sample_deck, slide_refs(1, 2, 3, 4), 2, 10, 0)

        toc = list(Presentation(str(output)).slides)[-1]
        frames = [shape for shape in toc.shapes if shape.name.startswith("Frame")]
        pictures = [shape for shape in toc.shapes if shape.name.startswith("Slide ")]
        captions = [shape for shape in toc.shapes if shape.name.startswith("Caption")]

        assert frames[0].left == pt_to_emu(10)
        assert frames[0].top == pt_to_emu(TITLE_HEIGHT)
        assert frames[1].top == frames[0].top
        assert frames[1].left > frames[0].left
        assert frames[2].left == frames[0].left
        assert frames[2].top > frames[0].top

        for frame, picture, caption in zip(frames, pictures, captions):
            assert (picture.left, picture.top, picture.width, picture.height) == (
                frame.left, frame.top, frame.width, frame.height,
            )
            assert caption.left == picture.left
            assert caption.top == picture.top + picture.height
            assert caption.width == picture.width
            assert caption.height == CAPTION_SHAPE_HEIGHT_EMU

    def test_frames_are_outlined_and_unfilled(
        self, generator, sample_deck, slide_refs, temp_dir
    ) -> None:
        output = generator.create_table_of_contents(sample_deck, slide_refs(1), None, 20, 0)

        toc = list(Presentation(str(output)).slides)[-1]
        frame = next(shape for shape in toc.shapes if shape.name == "Frame 1")

        assert str(frame.line.color.rgb) == "808080"
        assert frame._element.spPr.find(
            "{http://schemas.openxmlformats.org/drawingml/2006/main}noFill"
        ) is not None

    def test_exports_each_slide_once_at_fixed_size(
        self, generator, sample_deck, slide_refs, fake_renderer, temp_dir
    ) -> None:
        generator.create_table_of_contents(sample_deck, slide_refs(3, 1, 3), None, 20, 0)

        (renderer,) = fake_renderer.instances
        assert renderer.exported == [
            (3, EXPORT_WIDTH, EXPORT_HEIGHT),
            (1, EXPORT_WIDTH, EXPORT_HEIGHT),
        ]
        assert renderer.closed

    def test_second_run_does_not_overwrite(self, generator, sample_deck, slide_refs) -> None:
        first = generator.create_table_of_contents(sample_deck, slide_refs(1), None, 20, 0)
        second = generator.create_table_of_contents(sample_deck, slide_refs(2), None, 20, 0)

        assert first.name == "deck_TOC.pptx"
        assert second.name == "deck_TOC(2).pptx"
        assert len(Presentation(str(first)).slides) == 6

    def test_save_failure_cleans_up_and_propagates(
        self, generator, sample_deck, slide_refs, temp_dir, monkeypatch
    ) -> None:
        def broken_save(self) -> None:
            raise ContainerError("disk full")

        monkeypatch.setattr(TocSlideBuilder, "save", broken_save)

        with pytest.raises(ContainerError, match="disk full"):
            generator.create_table_of_contents(sample_deck, slide_refs(1, 2), None, 20, 0)

        assert not temp_dir.exists()

    def test_cleanup_failure_is_swallowed(
        self, generator, sample_deck, slide_refs, temp_dir, monkeypatch
    ) -> None:
        def rmtree(path, *args, **kwargs):
            raise PermissionError("locked")

        monkeypatch.setattr(core.toc_generator.shutil, "rmtree", rmtree)

        output = generator.create_table_of_contents(sample_deck, slide_refs(1), None, 20, 0)

        assert output.exists()


def test_slide_geometry_equals_preview_placement(
    generator, sample_deck, slide_refs, temp_dir
) -> None:
    selection = slide_refs(5, 2, 4, 1, 3)

    output = generator.create_table_of_contents(sample_deck, selection, None, 15, 0)

    toc = list(Presentation(str(output)).slides)[-1]
    pictures = [shape for shape in toc.shapes if shape.name.startswith("Slide ")]
    expected = [
        to_emu_rect(item)
        for item in project(selection, None, 15, Canvas(960, 540))
    ]
    assert [(p.left, p.top, p.width, p.height) for p in pictures] == [tuple(r) for r in expected]
