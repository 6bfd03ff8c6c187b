"""
Settings view for configuring slide rendering tools and layout defaults.

Provides UI for setting LibreOffice and Poppler paths,
with browse buttons and validation status.
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional

import flet as ft

from config.settings_manager import SettingsManager


def describe_problems(settings_manager: SettingsManager) -> List[str]:
    """List human-readable reasons why the settings are not usable."""
    s = settings_manager.settings
    missing = []

    if not s.soffice_path:
        missing.append("LibreOffice path not set")
    elif not Path(s.soffice_path).exists():
        missing.append("LibreOffice executable not found")

    if s.poppler_path and not Path(s.poppler_path).exists():
        missing.append("Poppler directory not found")

    return missing


def create_settings_view(
    page: ft.Page,
    settings_manager: SettingsManager,
    on_settings_changed: Optional[Callable[[], None]] = None
) -> ft.Container:
    """
    Create the settings view container.

    Args:
        page: Flet page instance.
        settings_manager: Settings manager for reading/writing settings.
        on_settings_changed: Optional callback when settings change.

    Returns:
        Container with settings UI.
    """
    settings = settings_manager.settings

    soffice_field = ft.TextField(
        label="LibreOffice (soffice) Path",
        value=settings.soffice_path,
        hint_text=r"C:\Program Files\LibreOffice\program\soffice.exe",
        expand=True,
        read_only=True,
        border_color=ft.Colors.BLUE_200,
    )

    poppler_field = ft.TextField(
        label="Poppler bin Path (optional)",
        value=settings.poppler_path,
        hint_text=r"C:\Program Files\poppler-xx.xx.x\Library\bin",
        expand=True,
        read_only=True,
        border_color=ft.Colors.BLUE_200,
    )

    columns_field = ft.TextField(
        label="Default columns",
        value=str(settings.default_columns),
        width=160,
        keyboard_type=ft.KeyboardType.NUMBER,
    )

    margin_field = ft.TextField(
        label="Default margin (pt)",
        value=str(settings.default_margin),
        width=160,
        keyboard_type=ft.KeyboardType.NUMBER,
    )

    status_icon = ft.Icon(ft.Icons.ERROR, color=ft.Colors.RED)
    status_text = ft.Text(value="Configuration incomplete", color=ft.Colors.RED)

    def notify_changed() -> None:
        update_status()
        if on_settings_changed:
            on_settings_changed()

    def update_status() -> None:
        """Update status display based on current settings."""
        problems = describe_problems(settings_manager)

        if not problems:
            status_icon.icon = ft.Icons.CHECK_CIRCLE
            status_icon.color = ft.Colors.GREEN
            status_text.value = "Settings are valid"
            status_text.color = ft.Colors.GREEN
        else:
            status_icon.icon = ft.Icons.ERROR
            status_icon.color = ft.Colors.RED
            status_text.value = "; ".join(problems)
            status_text.color = ft.Colors.RED

        page.update()

    async def browse_soffice(e: ft.ControlEvent) -> None:
        """Open file picker for LibreOffice."""
        files = await ft.FilePicker().pick_files(
            dialog_title="Select soffice executable",
            allow_multiple=False,
        )
        if files and len(files) > 0:
            path = files[0].path
            soffice_field.value = path
            settings_manager.update(soffice_path=path)
            notify_changed()

    async def browse_poppler(e: ft.ControlEvent) -> None:
        """Open directory picker for Poppler."""
        dir_path = await ft.FilePicker().get_directory_path(
            dialog_title="Select Poppler bin directory"
        )
        if dir_path:
            poppler_field.value = dir_path
            settings_manager.update(poppler_path=dir_path)
            notify_changed()

    def save_defaults(e: ft.ControlEvent) -> None:
        """Persist default columns and margin when both are valid."""
        try:
            columns = int(columns_field.value)
            margin = int(margin_field.value)
        except (TypeError, ValueError):
            columns_field.error_text = "Enter whole numbers"
            page.update()
            return
        if columns < 1 or margin < 0:
            columns_field.error_text = "Columns >= 1, margin >= 0"
            page.update()
            return
        columns_field.error_text = None
        settings_manager.update(default_columns=columns, default_margin=margin)
        notify_changed()

    columns_field.on_blur = save_defaults
    margin_field.on_blur = save_defaults

    update_status()

    return ft.Container(
        content=ft.Column(
            controls=[
                ft.Text(
                    "Settings",
                    size=24,
                    weight=ft.FontWeight.BOLD,
                ),
                ft.Divider(),

                ft.Text(
                    "Slide Rendering",
                    size=16,
                    weight=ft.FontWeight.W_500,
                ),
                ft.Text(
                    "LibreOffice converts the presentation to PDF and Poppler renders "
                    "the thumbnails. Without them, slides are shown as grey placeholders.",
                    color=ft.Colors.GREY_600,
                ),

                ft.Container(height=20),

                ft.Row(
                    controls=[
                        soffice_field,
                        ft.ElevatedButton(
                            "Browse",
                            icon=ft.Icons.FOLDER_OPEN,
                            on_click=browse_soffice,
                        ),
                    ],
                    alignment=ft.MainAxisAlignment.START,
                ),

                ft.Container(height=10),

                ft.Row(
                    controls=[
                        poppler_field,
                        ft.ElevatedButton(
                            "Browse",
                            icon=ft.Icons.FOLDER_OPEN,
                            on_click=browse_poppler,
                        ),
                    ],
                    alignment=ft.MainAxisAlignment.START,
                ),

                ft.Container(height=20),

                ft.Row(
                    controls=[status_icon, status_text],
                    spacing=10,
                ),

                ft.Container(height=30),

                ft.Text(
                    "Layout Defaults",
                    size=16,
                    weight=ft.FontWeight.W_500,
                ),
                ft.Row(
                    controls=[columns_field, margin_field],
                    spacing=20,
                ),

                ft.Container(height=30),

                ft.Row(
                    controls=[
                        ft.TextButton(
                            "Download LibreOffice",
                            icon=ft.Icons.DOWNLOAD,
                            url="https://www.libreoffice.org/download/download-libreoffice/",
                        ),
                        ft.TextButton(
                            "Download Poppler",
                            icon=ft.Icons.DOWNLOAD,
                            url="https://github.com/oschwartz10612/poppler-windows/releases",
                        ),
                    ],
                    spacing=20,
                ),
            ],
            spacing=5,
            scroll=ft.ScrollMode.AUTO,
        ),
        padding=30,
        expand=True,
    )
