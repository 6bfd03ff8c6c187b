"""Layout constants and persisted user settings"""
from .defaults import *
from .settings_manager import Settings, SettingsManager

__all__ = ['Settings', 'SettingsManager']
