"""
PyInstaller compatible resource path resolution utilities
"""
import os
import subprocess
import sys
from pathlib import Path

APP_DATA_DIRNAME = 'SlideTocBuilder'


def resource_path(relative_path: str) -> Path:
    """
    Returns correct resource path for both PyInstaller --onefile execution
    and normal script execution

    Args:
        relative_path: Relative path from project root

    Returns:
        Path: Absolute path
    """
    if hasattr(sys, '_MEIPASS'):
        base_path = Path(sys._MEIPASS)
    else:
        base_path = Path(__file__).parent.parent

    return base_path / relative_path


def get_app_data_dir() -> Path:
    """
    Get application data directory
    Windows: %APPDATA%/SlideTocBuilder, elsewhere ~/.config/SlideTocBuilder

    Returns:
        Path: Application data directory
    """
    if sys.platform == 'win32':
        base = Path(os.environ.get('APPDATA', ''))
    else:
        base = Path(os.environ.get('XDG_CONFIG_HOME', '') or Path.home() / '.config')

    app_dir = base / APP_DATA_DIRNAME
    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def open_with_default_app(path: Path) -> None:
    """Open a file with the platform's associated application."""
    if sys.platform == 'win32':
        os.startfile(str(path))  # type: ignore[attr-defined]
    elif sys.platform == 'darwin':
        subprocess.Popen(['open', str(path)])
    else:
        subprocess.Popen(['xdg-open', str(path)])
