"""
Main application layout with sidebar navigation.

Switches between the TOC builder and the settings page.
"""
from __future__ import annotations

from typing import Callable, List, NamedTuple

import flet as ft

from config.defaults import THEME_PRIMARY
from config.settings_manager import SettingsManager
from ui.views.home_view import create_home_view
from ui.views.settings_view import create_settings_view


class Destination(NamedTuple):
    """One navigation rail entry and the factory for its view."""
    label: str
    icon: str
    selected_icon: str
    build: Callable[[ft.Page, SettingsManager], ft.Control]


DESTINATIONS: List[Destination] = [
    Destination(
        "Builder",
        ft.Icons.GRID_VIEW_OUTLINED,
        ft.Icons.GRID_VIEW,
        create_home_view,
    ),
    Destination(
        "Settings",
        ft.Icons.SETTINGS_OUTLINED,
        ft.Icons.SETTINGS,
        lambda page, manager: create_settings_view(
            page,
            manager,
            # Builder controls pick up new default columns and margin
            lambda: page.pubsub.send_all_on_topic("settings_changed", None),
        ),
    ),
]


def _rail_header() -> ft.Container:
    return ft.Container(
        content=ft.Column(
            controls=[
                ft.Icon(ft.Icons.GRID_VIEW, size=32, color=THEME_PRIMARY),
                ft.Text(
                    "TOC\nBuilder",
                    size=12,
                    text_align=ft.TextAlign.CENTER,
                    weight=ft.FontWeight.BOLD,
                ),
            ],
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            spacing=5,
        ),
        padding=ft.Padding(top=20, bottom=20, left=0, right=0),
    )


def create_app_layout(
    page: ft.Page,
    settings_manager: SettingsManager,
) -> ft.Row:
    """
    Create the main application layout.

    Views are built once up front so the builder keeps its loaded
    slides while the user visits the settings page.

    Args:
        page: Flet page instance.
        settings_manager: Settings manager instance.

    Returns:
        Row containing sidebar and content area.
    """
    views = [destination.build(page, settings_manager) for destination in DESTINATIONS]
    content_area = ft.Container(content=views[0], expand=True)

    def on_nav_change(e: ft.ControlEvent) -> None:
        content_area.content = views[e.control.selected_index]
        page.update()

    sidebar = ft.NavigationRail(
        selected_index=0,
        label_type=ft.NavigationRailLabelType.ALL,
        min_width=100,
        min_extended_width=200,
        bgcolor=ft.Colors.SURFACE,
        leading=_rail_header(),
        destinations=[
            ft.NavigationRailDestination(
                icon=destination.icon,
                selected_icon=destination.selected_icon,
                label=destination.label,
            )
            for destination in DESTINATIONS
        ],
        on_change=on_nav_change,
    )

    return ft.Row(
        controls=[sidebar, ft.VerticalDivider(width=1), content_area],
        expand=True,
    )
