"""Declarative settings panels kept in sync with a nested value store."""

from .app_settings import MISSING, PanelConfig, apply_defaults, get_path, set_path
from .core import (
    Color,
    ConfigurationError,
    PanelDirectory,
    SettingDefinition,
    SettingHandle,
    SettingKind,
    SettingsError,
    SettingsPanel,
)

__version__ = "0.1.0"

__all__ = [
    "MISSING",
    "Color",
    "ConfigurationError",
    "PanelConfig",
    "PanelDirectory",
    "SettingDefinition",
    "SettingHandle",
    "SettingKind",
    "SettingsError",
    "SettingsPanel",
    "apply_defaults",
    "get_path",
    "set_path",
]
