from __future__ import annotations

import json
from pathlib import Path

import pytest

import config.settings_manager
from config.defaults import DEFAULT_COLUMNS, DEFAULT_MARGIN
from config.settings_manager import Settings, SettingsManager


@pytest.fixture
def no_tools(monkeypatch):
    """Hide LibreOffice and Poppler from auto-detection."""
    monkeypatch.setattr(config.settings_manager.shutil, "which", lambda name: None)
    monkeypatch.setattr(config.settings_manager, "DEFAULT_SOFFICE_PATHS", [])
    monkeypatch.setattr(config.settings_manager, "DEFAULT_POPPLER_PATHS", [])


@pytest.fixture
def settings_file(tmp_path: Path) -> Path:
    return tmp_path / "settings.json"


def test_defaults_are_written(settings_file: Path, no_tools) -> None:
    manager = SettingsManager(settings_path=settings_file)

    assert manager.settings == Settings()
    data = json.loads(settings_file.read_text(encoding="utf-8"))
    assert data["default_columns"] == DEFAULT_COLUMNS
    assert data["default_margin"] == DEFAULT_MARGIN
    assert not manager.settings.is_valid()


def test_update_persists(settings_file: Path, no_tools) -> None:
    SettingsManager(settings_path=settings_file).update(default_columns=5, use_fixed_columns=True)

    reloaded = SettingsManager(settings_path=settings_file)

    assert reloaded.settings.default_columns == 5
    assert reloaded.settings.use_fixed_columns is True


def test_unknown_keys_are_ignored(settings_file: Path, no_tools, caplog) -> None:
    manager = SettingsManager(settings_path=settings_file)

    manager.update(colour="red", default_margin=12)

    assert manager.settings.default_margin == 12
    assert not hasattr(manager.settings, "colour")
    assert "colour" in caplog.text


def test_corrupt_file_falls_back_to_defaults(settings_file: Path, no_tools) -> None:
    settings_file.write_text("{not json", encoding="utf-8")

    manager = SettingsManager(settings_path=settings_file)

    assert manager.settings.default_columns == DEFAULT_COLUMNS
    json.loads(settings_file.read_text(encoding="utf-8"))


def test_unexpected_fields_fall_back_to_defaults(settings_file: Path, no_tools) -> None:
    settings_file.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")

    assert SettingsManager(settings_path=settings_file).settings == Settings()


def test_detects_tools_on_path(settings_file: Path, tmp_path: Path, monkeypatch) -> None:
    soffice = tmp_path / "bin" / "soffice"
    pdftoppm = tmp_path / "poppler" / "pdftoppm"
    for tool in (soffice, pdftoppm):
        tool.parent.mkdir()
        tool.touch()
    found = {"soffice": str(soffice), "pdftoppm": str(pdftoppm)}
    monkeypatch.setattr(config.settings_manager.shutil, "which", found.get)

    manager = SettingsManager(settings_path=settings_file)

    assert manager.settings.soffice_path == str(soffice)
    assert manager.settings.poppler_path == str(pdftoppm.parent)
    assert manager.settings.is_valid()


def test_stale_paths_are_redetected(settings_file: Path, tmp_path: Path, monkeypatch) -> None:
    soffice = tmp_path / "libreoffice"
    soffice.touch()
    settings_file.write_text(
        json.dumps({"soffice_path": "/gone/soffice", "poppler_path": "/gone/bin"}),
        encoding="utf-8",
    )
    monkeypatch.setattr(
        config.settings_manager.shutil, "which",
        lambda name: str(soffice) if name == "libreoffice" else None,
    )
    monkeypatch.setattr(config.settings_manager, "DEFAULT_POPPLER_PATHS", [])

    manager = SettingsManager(settings_path=settings_file)

    assert manager.settings.soffice_path == str(soffice)
    assert manager.settings.poppler_path == ""


def test_settings_page_lists_problems(settings_file: Path, tmp_path: Path, no_tools) -> None:
    from ui.views.settings_view import describe_problems

    manager = SettingsManager(settings_path=settings_file)
    assert describe_problems(manager) == ["LibreOffice path not set"]

    soffice = tmp_path / "soffice"
    soffice.touch()
    manager.update(soffice_path=str(soffice), poppler_path=str(tmp_path / "gone"))
    assert describe_problems(manager) == ["Poppler directory not found"]
