from .capture_dialogs import QtCaptureProvider
from .directory_window import DirectoryWindow
from .settings_view import SettingsView, format_row_text

__all__ = ["DirectoryWindow", "QtCaptureProvider", "SettingsView", "format_row_text"]
