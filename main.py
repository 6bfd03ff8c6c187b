"""
Slide TOC Builder

Application entry point.
Adds a table of contents slide with linked thumbnails to a PowerPoint deck.

Usage:
    python main.py [--debug]
"""
from __future__ import annotations

import logging
import sys

import flet as ft

from config.defaults import (
    APP_NAME,
    APP_VERSION,
    THEME_BACKGROUND,
    THEME_PRIMARY,
)
from config.settings_manager import SettingsManager
from ui.app_layout import create_app_layout
from ui.log_handler import create_console_handler
from ui.views.settings_view import describe_problems
from utils.system import resource_path

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger(__name__)


def configure_window(page: ft.Page) -> None:
    """Apply title, size limits, theme and icon."""
    page.title = f"{APP_NAME} v{APP_VERSION}"
    page.window.width = 1200
    page.window.height = 800
    page.window.min_width = 900
    page.window.min_height = 650
    page.bgcolor = THEME_BACKGROUND
    page.theme = ft.Theme(color_scheme_seed=THEME_PRIMARY)
    page.theme_mode = ft.ThemeMode.LIGHT

    icon_path = resource_path("assets/icon.png")
    if icon_path.exists():
        page.window.icon = str(icon_path)


def main(page: ft.Page) -> None:
    """
    Flet application main function.

    Args:
        page: Flet page instance.
    """
    configure_window(page)

    settings_manager = SettingsManager()
    logger.info(f"Settings file: {settings_manager.settings_path}")
    for problem in describe_problems(settings_manager):
        # Slides still load, rendered as placeholders
        logger.warning(f"{problem} - configure it in Settings page")

    page.add(create_app_layout(page, settings_manager))
    logger.info(f"{APP_NAME} started")


def run() -> None:
    """Console script entry point."""
    if "--debug" in sys.argv:
        core_logger = logging.getLogger("core")
        core_logger.setLevel(logging.DEBUG)
        core_logger.addHandler(create_console_handler())
        core_logger.propagate = False
    ft.run(main)


if __name__ == "__main__":
    run()
