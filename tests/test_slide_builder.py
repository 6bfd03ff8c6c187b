from __future__ import annotations

from pathlib import Path

import pytest
from pptx import Presentation

from core.errors import ContainerError, InvalidInputError
from core.slide_builder import EmuRect, NavigationLink, ShapeKind, TocSlideBuilder
from core.thumbnails import create_placeholder

RECT = EmuRect(left=914400, top=1524000, width=1828800, height=1028700)


def test_open_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ContainerError):
        TocSlideBuilder(tmp_path / "missing.pptx").open()


def test_open_non_pptx_file(tmp_path: Path) -> None:
    bogus = tmp_path / "notes.pptx"
    bogus.write_text("not a zip archive")

    with pytest.raises(ContainerError):
        TocSlideBuilder(bogus).open()


def test_reports_slide_count_and_size(sample_deck: Path) -> None:
    with TocSlideBuilder(sample_deck) as builder:
        assert builder.slide_count == 5
        assert builder.slide_size == (12192000, 6858000)
        ids = builder.slide_ids

    assert ids == sorted(ids)
    assert len(set(ids)) == 5


@pytest.mark.parametrize("index", [-1, 5])
def test_new_slide_rejects_bad_background_index(sample_deck: Path, index: int) -> None:
    with TocSlideBuilder(sample_deck) as builder:
        with pytest.raises(InvalidInputError):
            builder.new_slide_from(index)
        assert builder.slide_count == 5


def test_new_slide_is_appended_without_placeholders(sample_deck: Path) -> None:
    with TocSlideBuilder(sample_deck) as builder:
        before = builder.slide_ids
        slide = builder.new_slide_from(1)

        assert builder.slide_count == 6
        assert slide.slide_id > max(before)
        assert builder.slide_ids[-1] == slide.slide_id
        assert slide.slide_layout.name == "Title and Content"
        assert len(slide.shapes) == 0


def test_add_shape_requires_slide(sample_deck: Path) -> None:
    with TocSlideBuilder(sample_deck) as builder:
        with pytest.raises(RuntimeError):
            builder.add_shape(ShapeKind.FRAME, RECT)


def test_properties_require_open_package(sample_deck: Path) -> None:
    with pytest.raises(RuntimeError):
        TocSlideBuilder(sample_deck).slide_count


@pytest.mark.parametrize("link", [0, 6, 42])
def test_link_must_target_a_source_slide(sample_deck: Path, link: int) -> None:
    # slide 6 is the TOC slide itself
    with TocSlideBuilder(sample_deck) as builder:
        builder.new_slide_from(0)
        with pytest.raises(InvalidInputError):
            builder.add_shape(ShapeKind.CAPTION, RECT, content="Slide", link=link)


def test_picture_needs_content(sample_deck: Path) -> None:
    with TocSlideBuilder(sample_deck) as builder:
        builder.new_slide_from(0)
        with pytest.raises(ValueError):
            builder.add_shape(ShapeKind.PICTURE, RECT)


def test_ids_count_up_per_kind(sample_deck: Path) -> None:
    png = create_placeholder(1, 32, 18)

    with TocSlideBuilder(sample_deck) as builder:
        builder.new_slide_from(0)
        shapes = [
            builder.add_shape(ShapeKind.FRAME, RECT),
            builder.add_shape(ShapeKind.PICTURE, RECT, content=png),
            builder.add_shape(ShapeKind.FRAME, RECT),
            builder.add_shape(ShapeKind.CAPTION, RECT, content="x"),
            builder.add_shape(ShapeKind.PICTURE, RECT, content=png),
        ]

        assert [shape.shape_id for shape in shapes] == [3000, 2000, 3001, 4000, 2001]


def test_picture_is_stretched_over_rectangle(sample_deck: Path, tmp_path: Path) -> None:
    image_path = tmp_path / "wide.png"
    image_path.write_bytes(create_placeholder(2, 400, 100))

    with TocSlideBuilder(sample_deck) as builder:
        builder.new_slide_from(0)
        picture = builder.add_shape(ShapeKind.PICTURE, RECT, content=image_path, link=2)

        assert (picture.left, picture.top, picture.width, picture.height) == RECT
        assert picture.click_action.target_slide.slide_id == builder.slide_ids[1]


def test_save_round_trip(sample_deck: Path) -> None:
    with TocSlideBuilder(sample_deck) as builder:
        builder.new_slide_from(4)
        builder.add_shape(ShapeKind.CAPTION, RECT, content="Slide 3", link=3, name="Caption 3")
        builder.save()

    slides = list(Presentation(str(sample_deck)).slides)
    assert len(slides) == 6
    (caption,) = slides[-1].shapes
    assert caption.name == "Caption 3"
    assert caption.shape_id == 4000
    assert caption.text_frame.text == "Slide 3"
    assert caption.text_frame.word_wrap is True


def test_save_failure_raises_container_error(sample_deck: Path, tmp_path: Path) -> None:
    builder = TocSlideBuilder(sample_deck)
    builder.open()
    builder.pptx_path = tmp_path / "missing-dir" / "out.pptx"

    with pytest.raises(ContainerError):
        builder.save()


def test_links_share_one_relationship_per_target(sample_deck: Path) -> None:
    png = create_placeholder(2, 32, 18)

    with TocSlideBuilder(sample_deck) as builder:
        slide = builder.new_slide_from(0)
        builder.add_shape(ShapeKind.FRAME, RECT)
        builder.add_shape(ShapeKind.PICTURE, RECT, content=png, link=2)
        builder.add_shape(ShapeKind.CAPTION, RECT, content="Slide 2", link=2)
        target_id = builder.slide_ids[1]
        links = builder.links

        assert links == [
            NavigationLink(2000, target_id, links[0].r_id),
            NavigationLink(4000, target_id, links[0].r_id),
        ]
        assert slide.part.related_part(links[0].r_id) is builder.prs.slides[1].part
