"""
Settings management class
- Save/load settings in JSON format
- Auto-detect LibreOffice/Poppler paths
"""
from __future__ import annotations
import json
import shutil
import logging
from pathlib import Path
from dataclasses import dataclass, asdict
from typing import Optional

from utils.system import get_app_data_dir
from .defaults import (
    SETTINGS_FILENAME,
    DEFAULT_SOFFICE_PATHS,
    DEFAULT_POPPLER_PATHS,
    DEFAULT_COLUMNS,
    DEFAULT_MARGIN,
)

logger = logging.getLogger(__name__)

@dataclass
class Settings:
    """Application settings"""
    soffice_path: str = ""
    poppler_path: str = ""
    default_columns: int = DEFAULT_COLUMNS
    default_margin: int = DEFAULT_MARGIN
    use_fixed_columns: bool = False
    last_input_dir: str = ""

    def is_valid(self) -> bool:
        """Check if settings are valid"""
        # Poppler is optional: pdf2image falls back to PATH when it is unset
        soffice_ok = bool(self.soffice_path) and Path(self.soffice_path).exists()
        poppler_ok = not self.poppler_path or Path(self.poppler_path).exists()
        return soffice_ok and poppler_ok


class SettingsManager:
    """Manages settings reading, writing, and auto-detection"""

    def __init__(self, settings_path: Optional[Path] = None):
        self._settings_path = settings_path or get_app_data_dir() / SETTINGS_FILENAME
        self._settings: Settings = Settings()
        self._load()

        # Auto-detect paths if not set or invalid
        if not self._settings.soffice_path or not Path(self._settings.soffice_path).exists():
            detected = self._detect_soffice()
            if detected:
                self._settings.soffice_path = str(detected)

        if not self._settings.poppler_path or not Path(self._settings.poppler_path).exists():
            detected = self._detect_poppler()
            self._settings.poppler_path = str(detected) if detected else ""

        self._save()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def settings_path(self) -> Path:
        return self._settings_path

    def update(self, **kwargs) -> None:
        """Update settings and save"""
        for key, value in kwargs.items():
            if hasattr(self._settings, key):
                setattr(self._settings, key, value)
            else:
                logger.warning(f"Ignoring unknown setting: {key}")
        self._save()

    def _load(self) -> None:
        """Load settings from file"""
        if self._settings_path.exists():
            try:
                with open(self._settings_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                    self._settings = Settings(**data)
            except (json.JSONDecodeError, TypeError):
                logger.warning(f"Invalid settings file, using defaults: {self._settings_path}")
                self._settings = Settings()

    def _save(self) -> None:
        """Save settings to file"""
        try:
            with open(self._settings_path, 'w', encoding='utf-8') as f:
                json.dump(asdict(self._settings), f, indent=2, ensure_ascii=False)
        except (IOError, OSError) as e:
            logger.error(f"Failed to save settings: {e}")

    def _detect_soffice(self) -> Optional[Path]:
        """Auto-detect LibreOffice"""
        for name in ("soffice", "libreoffice"):
            which_result = shutil.which(name)
            if which_result:
                return Path(which_result)

        for path in DEFAULT_SOFFICE_PATHS:
            if path.exists():
                return path

        # Search for versioned installs (Windows)
        program_files = Path(r"C:\Program Files")
        if program_files.exists():
            for office_dir in program_files.glob("LibreOffice*"):
                candidate = office_dir / "program" / "soffice.exe"
                if candidate.exists():
                    return candidate

        return None

    def _detect_poppler(self) -> Optional[Path]:
        """Auto-detect Poppler"""
        # Search for pdftoppm using shutil.which
        which_result = shutil.which("pdftoppm")
        if which_result:
            return Path(which_result).parent

        # Check default paths
        for path in DEFAULT_POPPLER_PATHS:
            if path.exists():
                return path

        program_files = Path(r"C:\Program Files")
        if program_files.exists():
            for poppler_dir in program_files.glob("poppler-*"):
                for bin_path in ["Library/bin", "bin"]:
                    candidate = poppler_dir / bin_path
                    if candidate.exists():
                        return candidate

        return None
