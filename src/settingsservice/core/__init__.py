"""Settings core: definitions, registry, value resolution and display sync."""

from .capture import CaptureProvider, ColorCaptureFlow, ColorStep, TextColorCapture, TextInputProvider
from .contracts import SettingsSurface
from .definition import KIND_ALIASES, WHITE, Color, SettingDefinition, SettingKind
from .directory import PanelDirectory
from .errors import ConfigurationError, SettingsError
from .kinds import KIND_BEHAVIOURS, KindBehaviour, behaviour_for
from .panel import SettingHandle, SettingsPanel
from .registry import SettingRegistry
from .resolver import read_value, seed_default, storable_default, write_value
from .rows import RowHandle
from .stepping import cycle_choice, format_number, snap
from .sync import DisplaySyncEngine

__all__ = [
    "KIND_ALIASES",
    "KIND_BEHAVIOURS",
    "WHITE",
    "CaptureProvider",
    "Color",
    "ColorCaptureFlow",
    "ColorStep",
    "ConfigurationError",
    "DisplaySyncEngine",
    "KindBehaviour",
    "PanelDirectory",
    "RowHandle",
    "SettingDefinition",
    "SettingHandle",
    "SettingKind",
    "SettingRegistry",
    "SettingsError",
    "SettingsPanel",
    "SettingsSurface",
    "TextColorCapture",
    "TextInputProvider",
    "behaviour_for",
    "cycle_choice",
    "format_number",
    "read_value",
    "seed_default",
    "snap",
    "storable_default",
    "write_value",
]
