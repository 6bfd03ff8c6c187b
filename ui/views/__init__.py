"""
Screens of the application: the TOC builder and the settings page.
"""
from .home_view import HomeViewState, apply_layout_defaults, create_home_view, render_preview
from .settings_view import create_settings_view, describe_problems

__all__ = [
    "HomeViewState",
    "create_home_view",
    "render_preview",
    "apply_layout_defaults",
    "create_settings_view",
    "describe_problems",
]
