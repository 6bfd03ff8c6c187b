"""
Home view for building a table of contents slide.

Provides the main interface including:
- Presentation selection and slide loading
- Slide selection and background slide choice
- Column / margin controls with a live grid preview
- TOC generation and log viewer
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import flet as ft

from config.defaults import (
    DEFAULT_SLIDE_HEIGHT,
    DEFAULT_SLIDE_WIDTH,
    PREVIEW_MAX_SCALE,
    PREVIEW_MIN_SCALE,
)
from config.settings_manager import Settings, SettingsManager
from core.errors import TocBuilderError
from core.geometry import emu_to_pt
from core.models import Canvas, PlacedItem, SlideRef
from core.preview import calculate_canvas_size, project
from core.thumbnails import ThumbnailService, get_native_slide_size
from core.toc_generator import TocGenerator
from ui.log_handler import setup_logger
from utils.system import open_with_default_app

PREVIEW_VIEWPORT_WIDTH = 640
PREVIEW_VIEWPORT_HEIGHT = 360
MAX_LOG_ENTRIES = 100

LOG_COLORS = {
    "WARNING": ft.Colors.ORANGE_700,
    "ERROR": ft.Colors.RED_700,
    "CRITICAL": ft.Colors.RED_900,
}


@dataclass
class HomeViewState:
    """Mutable state for the home view."""
    selected_file: Optional[Path] = None
    slides: List[SlideRef] = field(default_factory=list)
    background_index: int = 0  # the single slide whose layout the TOC inherits
    canvas: Canvas = field(default_factory=Canvas)
    is_busy: bool = False

    @property
    def selected_slides(self) -> List[SlideRef]:
        return [slide for slide in self.slides if slide.is_selected]


class _Worker:
    """Runs one job at a time in a daemon thread and reports via PubSub."""

    def __init__(self, page: ft.Page, settings_manager: SettingsManager, name: str):
        self.page = page
        self.settings_manager = settings_manager
        self.thread: Optional[threading.Thread] = None
        self.logger = setup_logger(
            name,
            lambda level, msg: self.page.pubsub.send_all_on_topic("log", (level, msg)),
            extra_loggers=["core"],
        )

    def _start(self, target, *args) -> None:
        if self.thread is not None and self.thread.is_alive():
            self.logger.warning("A job is already running")
            return
        self.thread = threading.Thread(target=target, args=args, daemon=True)
        self.thread.start()

    def _fail(self, message: str) -> None:
        self.logger.error(message)
        self.page.pubsub.send_all_on_topic("status", "error")
        self.page.pubsub.send_all_on_topic("error_message", message)


class SlideLoadWorker(_Worker):
    """Loads slide thumbnails of a presentation off the UI thread."""

    def __init__(self, page: ft.Page, settings_manager: SettingsManager):
        super().__init__(page, settings_manager, "loader")

    def start(self, pptx_path: Path) -> None:
        self._start(self._process, pptx_path)

    def _process(self, pptx_path: Path) -> None:
        settings = self.settings_manager.settings
        try:
            self.page.pubsub.send_all_on_topic("status", "busy")
            self.logger.info(f"Loading slides: {pptx_path.name}")

            if not settings.is_valid():
                self.logger.warning("LibreOffice not configured - thumbnails will be placeholders")

            service = ThumbnailService(settings.soffice_path, settings.poppler_path)
            slides = service.get_slides(pptx_path)
            width_emu, height_emu = get_native_slide_size(pptx_path)

            canvas = Canvas(emu_to_pt(width_emu), emu_to_pt(height_emu))
            self.logger.info(f"Loaded {len(slides)} slides")
            self.page.pubsub.send_all_on_topic("slides_loaded", (slides, canvas))
            self.page.pubsub.send_all_on_topic("status", "idle")
        except (TocBuilderError, OSError, ValueError, KeyError) as e:
            self._fail(f"Could not load presentation: {e}")


class TocWorker(_Worker):
    """Generates the TOC deck off the UI thread."""

    def __init__(self, page: ft.Page, settings_manager: SettingsManager):
        super().__init__(page, settings_manager, "toc")

    def start(
        self,
        pptx_path: Path,
        slides: List[SlideRef],
        columns: Optional[int],
        margin: int,
        background_index: int,
    ) -> None:
        self._start(self._process, pptx_path, slides, columns, margin, background_index)

    def _process(
        self,
        pptx_path: Path,
        slides: List[SlideRef],
        columns: Optional[int],
        margin: int,
        background_index: int,
    ) -> None:
        settings = self.settings_manager.settings
        try:
            self.page.pubsub.send_all_on_topic("status", "busy")
            self.logger.info(f"Creating table of contents for {len(slides)} slides...")

            generator = TocGenerator(settings.soffice_path, settings.poppler_path)
            output_path = generator.create_table_of_contents(
                pptx_path, slides, columns, margin, background_index,
            )

            self.logger.info(f"Done! File saved: {output_path.name}")
            self.page.pubsub.send_all_on_topic("toc_done", str(output_path))
            self.page.pubsub.send_all_on_topic("status", "done")
        except (TocBuilderError, OSError) as e:
            self._fail(f"Could not create table of contents: {e}")


def apply_layout_defaults(
    settings: Settings,
    columns_field: ft.TextField,
    margin_slider: ft.Slider,
) -> None:
    """Copy the saved default columns and margin into the builder controls."""
    columns_field.value = str(settings.default_columns)
    margin_slider.value = settings.default_margin


def render_preview(
    items: List[PlacedItem],
    canvas: Canvas,
    background: Optional[bytes],
) -> ft.Container:
    """
    Draw placed items on a scaled copy of the slide.

    Args:
        items: Cells from project().
        canvas: Real slide size in points.
        background: Thumbnail of the background slide, if any.

    Returns:
        Container holding a Stack of positioned thumbnails.
    """
    canvas_w, canvas_h = calculate_canvas_size(items)
    canvas_w = max(canvas_w, canvas.width)
    canvas_h = max(canvas_h, canvas.height)

    scale = min(PREVIEW_VIEWPORT_WIDTH / canvas_w, PREVIEW_VIEWPORT_HEIGHT / canvas_h)
    scale = max(PREVIEW_MIN_SCALE, min(PREVIEW_MAX_SCALE, scale))

    controls: List[ft.Control] = []
    if background:
        controls.append(ft.Image(
            src=background,
            left=0,
            top=0,
            width=canvas.width * scale,
            height=canvas.height * scale,
            opacity=0.5,
        ))

    for item in items:
        controls.append(ft.Container(
            left=item.x * scale,
            top=item.y * scale,
            width=item.width * scale,
            height=item.height * scale,
            border=ft.Border.all(1, ft.Colors.GREY_600),
            content=ft.Image(
                src=item.thumbnail,
                width=item.width * scale,
                height=item.height * scale,
            ) if item.thumbnail else None,
        ))
        controls.append(ft.Container(
            left=item.x * scale,
            top=(item.y + item.height) * scale,
            width=item.width * scale,
            height=item.caption_height * scale,
            content=ft.Text(item.caption, size=max(8, 11 * scale)),
        ))

    return ft.Container(
        content=ft.Stack(
            controls=controls,
            width=canvas_w * scale,
            height=canvas_h * scale,
        ),
        bgcolor=ft.Colors.WHITE,
        border=ft.Border.all(1, ft.Colors.GREY_300),
    )


def create_home_view(
    page: ft.Page,
    settings_manager: SettingsManager,
) -> ft.Container:
    """
    Create the home view container.

    Args:
        page: Flet page instance.
        settings_manager: Settings manager instance.

    Returns:
        Container with home view UI.
    """
    settings = settings_manager.settings
    state = HomeViewState(canvas=Canvas(DEFAULT_SLIDE_WIDTH, DEFAULT_SLIDE_HEIGHT))
    load_worker = SlideLoadWorker(page, settings_manager)
    toc_worker = TocWorker(page, settings_manager)

    # UI elements
    file_label = ft.Text("No presentation selected", size=16)

    open_button = ft.ElevatedButton("Open PPTX", icon=ft.Icons.FOLDER_OPEN)

    columns_field = ft.TextField(
        label="Columns",
        value=str(settings.default_columns),
        width=100,
        keyboard_type=ft.KeyboardType.NUMBER,
        disabled=not settings.use_fixed_columns,
    )

    fixed_columns_switch = ft.Switch(
        label="Fixed columns",
        value=settings.use_fixed_columns,
    )

    margin_slider = ft.Slider(
        min=0,
        max=60,
        divisions=60,
        value=settings.default_margin,
        label="Margin: {value}",
        width=250,
    )

    slide_list = ft.ListView(expand=True, spacing=4)
    background_group = ft.RadioGroup(content=slide_list, value="0")

    preview_area = ft.Container(
        content=render_preview([], state.canvas, None),
        alignment=ft.Alignment(0, 0),
        expand=True,
    )

    busy_ring = ft.ProgressRing(visible=False, width=24, height=24)

    generate_button = ft.ElevatedButton(
        "Generate TOC",
        icon=ft.Icons.PLAY_ARROW,
        disabled=True,
        width=200,
    )

    log_view = ft.ListView(expand=True, spacing=2, auto_scroll=True)

    def current_columns() -> Optional[int]:
        """Desired columns, or None when the optimizer should search."""
        if not fixed_columns_switch.value:
            return None
        try:
            value = int(columns_field.value)
        except (TypeError, ValueError):
            return None
        return value if value > 0 else None

    def current_margin() -> int:
        return int(margin_slider.value or 0)

    def update_can_generate() -> None:
        generate_button.disabled = state.is_busy or not state.selected_slides

    def update_preview() -> None:
        """Rebuild the preview from the current selection and controls."""
        items = project(
            state.selected_slides,
            current_columns(),
            current_margin(),
            state.canvas,
        )
        background = None
        if 0 <= state.background_index < len(state.slides):
            background = state.slides[state.background_index].thumbnail
        preview_area.content = render_preview(items, state.canvas, background)
        update_can_generate()
        page.update()

    def build_slide_row(slide: SlideRef, index: int) -> ft.Row:
        def on_check(e: ft.ControlEvent) -> None:
            slide.is_selected = bool(e.control.value)
            update_preview()

        return ft.Row(
            controls=[
                ft.Checkbox(value=slide.is_selected, on_change=on_check),
                ft.Image(src=slide.thumbnail, width=96, height=54) if slide.thumbnail else ft.Container(width=96),
                ft.Text(f"Slide {slide.number}", expand=True),
                ft.Radio(value=str(index), label="Background"),
            ],
            spacing=8,
        )

    def rebuild_slide_list() -> None:
        slide_list.controls = [
            build_slide_row(slide, index) for index, slide in enumerate(state.slides)
        ]
        background_group.value = str(state.background_index)

    def set_all_selected(selected: bool) -> None:
        for slide in state.slides:
            slide.is_selected = selected
        rebuild_slide_list()
        update_preview()

    def on_background_change(e: ft.ControlEvent) -> None:
        state.background_index = int(e.control.value)
        update_preview()

    background_group.on_change = on_background_change

    def on_layout_change(e: ft.ControlEvent) -> None:
        columns_field.disabled = not fixed_columns_switch.value
        settings_manager.update(
            use_fixed_columns=bool(fixed_columns_switch.value),
            default_margin=current_margin(),
        )
        update_preview()

    fixed_columns_switch.on_change = on_layout_change
    margin_slider.on_change_end = on_layout_change
    columns_field.on_submit = on_layout_change
    columns_field.on_blur = on_layout_change

    # Async event handler for file picking (Flet 0.80+ uses async FilePicker API)
    async def on_open_click(e: ft.ControlEvent) -> None:
        last_dir = settings_manager.settings.last_input_dir
        files = await ft.FilePicker().pick_files(
            dialog_title="Select presentation",
            allowed_extensions=["pptx"],
            allow_multiple=False,
            initial_directory=last_dir if last_dir and Path(last_dir).exists() else None,
        )
        if files and len(files) > 0:
            state.selected_file = Path(files[0].path)
            state.slides = []
            state.background_index = 0
            file_label.value = f"Selected: {state.selected_file.name}"
            settings_manager.update(last_input_dir=str(state.selected_file.parent))
            rebuild_slide_list()
            update_preview()
            load_worker.start(state.selected_file)

    open_button.on_click = on_open_click

    def on_generate_click(e: ft.ControlEvent) -> None:
        if state.selected_file is None or not state.selected_slides:
            return
        columns = current_columns()
        if columns is not None:
            settings_manager.update(default_columns=columns)
        toc_worker.start(
            state.selected_file,
            state.selected_slides,
            columns,
            current_margin(),
            state.background_index,
        )

    generate_button.on_click = on_generate_click

    # PubSub subscriptions
    def on_slides_loaded(topic: str, payload) -> None:
        slides, canvas = payload
        state.slides = slides
        state.canvas = canvas
        state.background_index = 0
        rebuild_slide_list()
        update_preview()

    def on_log(topic: str, payload) -> None:
        level, message = payload
        log_view.controls.append(
            ft.Text(
                message,
                size=12,
                font_family="monospace",
                selectable=True,
                color=LOG_COLORS.get(level),
            )
        )
        if len(log_view.controls) > MAX_LOG_ENTRIES:
            log_view.controls.pop(0)
        page.update()

    def on_status(topic: str, status: str) -> None:
        state.is_busy = status == "busy"
        busy_ring.visible = state.is_busy
        open_button.disabled = state.is_busy
        update_can_generate()
        page.update()

    def on_toc_done(topic: str, output_path: str) -> None:
        def open_result(e: ft.ControlEvent) -> None:
            open_with_default_app(Path(output_path))

        page.snack_bar = ft.SnackBar(
            content=ft.Text(f"Table of contents created: {Path(output_path).name}"),
            action="Open",
            on_action=open_result,
            bgcolor=ft.Colors.GREEN,
            duration=8000,
        )
        page.snack_bar.open = True
        page.update()

    def on_settings_changed(topic: str, payload) -> None:
        apply_layout_defaults(settings_manager.settings, columns_field, margin_slider)
        update_preview()

    def on_error_message(topic: str, message: str) -> None:
        page.snack_bar = ft.SnackBar(
            content=ft.Text(f"Error: {message}"),
            bgcolor=ft.Colors.RED,
            duration=5000,
        )
        page.snack_bar.open = True
        page.update()

    page.pubsub.subscribe_topic("slides_loaded", on_slides_loaded)
    page.pubsub.subscribe_topic("log", on_log)
    page.pubsub.subscribe_topic("status", on_status)
    page.pubsub.subscribe_topic("toc_done", on_toc_done)
    page.pubsub.subscribe_topic("error_message", on_error_message)
    page.pubsub.subscribe_topic("settings_changed", on_settings_changed)

    slide_panel = ft.Column(
        controls=[
            ft.Row(
                controls=[
                    ft.TextButton("Select all", on_click=lambda e: set_all_selected(True)),
                    ft.TextButton("Deselect all", on_click=lambda e: set_all_selected(False)),
                ],
            ),
            ft.Container(
                content=background_group,
                border=ft.Border.all(1, ft.Colors.GREY_300),
                border_radius=5,
                padding=5,
                expand=True,
            ),
        ],
        width=340,
        expand=False,
    )

    # Build layout
    return ft.Container(
        content=ft.Column(
            controls=[
                ft.Text(
                    "Table of Contents Builder",
                    size=24,
                    weight=ft.FontWeight.BOLD,
                ),
                ft.Divider(),

                ft.Row(
                    controls=[open_button, file_label, busy_ring],
                    spacing=10,
                ),

                ft.Row(
                    controls=[
                        fixed_columns_switch,
                        columns_field,
                        ft.Text("Margin"),
                        margin_slider,
                        generate_button,
                    ],
                    spacing=10,
                ),

                ft.Row(
                    controls=[slide_panel, preview_area],
                    vertical_alignment=ft.CrossAxisAlignment.START,
                    expand=True,
                ),

                ft.Text(
                    "Log",
                    size=14,
                    weight=ft.FontWeight.W_500,
                ),
                ft.Container(
                    content=log_view,
                    border=ft.Border.all(1, ft.Colors.GREY_300),
                    border_radius=5,
                    padding=10,
                    height=140,
                ),
            ],
            spacing=10,
            expand=True,
        ),
        padding=30,
        expand=True,
    )
