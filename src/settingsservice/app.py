import sys
import traceback
from typing import Any, Optional

from PySide6.QtWidgets import QApplication

from .core.directory import PanelDirectory
from .core.panel import SettingsPanel
from .logging_utils import configure_app_logging, get_logger
from .ui.capture_dialogs import QtCaptureProvider
from .ui.directory_window import DirectoryWindow
from .ui.settings_view import SettingsView

LOGGER = get_logger(__name__)

DEMO_DEFAULTS: dict[str, Any] = {
    "editor": {"font_size": 12, "word_wrap": True},
    "theme": {"name": "Dark"},
}


class _AccentState:
    """Host-owned value used to show accessor-mode settings."""

    def __init__(self) -> None:
        self.value = "Blue"

    def get(self) -> str:
        return self.value

    def set(self, value: str) -> None:
        self.value = value


def build_demo_directory(store: Optional[dict[str, Any]] = None) -> PanelDirectory:
    directory = PanelDirectory()
    capture = QtCaptureProvider()
    accent = _AccentState()

    editor = directory.create_panel(
        "Editor",
        store if store is not None else {},
        {"defaults": DEMO_DEFAULTS, "allowDefaults": True, "allowRefresh": True},
        capture=capture,
    )
    editor.add_setting({"type": "header", "name": "Text"})
    editor.add_setting(
        {
            "type": "slider",
            "name": "Font Size",
            "key": "editor.font_size",
            "min": 6,
            "max": 48,
            "step": 1,
            "tooltip": "Point size used in the editor",
        }
    )
    editor.add_setting({"type": "checkbox", "name": "Word Wrap", "key": "editor.word_wrap", "default": True})
    editor.add_setting(
        {"type": "textbox", "name": "Default Encoding", "key": "editor.encoding", "default": "utf-8", "maxChars": 32}
    )
    editor.add_setting({"type": "divider"})
    editor.add_setting({"type": "header", "name": "Look"})
    editor.add_setting(
        {
            "type": "dropdown",
            "name": "Theme",
            "key": "theme.name",
            "options": ["Light", "Dark", "System"],
            "default": "Dark",
        }
    )
    editor.add_setting(
        {
            "type": "dropdown",
            "name": "Accent",
            "options": ["Blue", "Green", "Orange"],
            "getFunction": accent.get,
            "setFunction": accent.set,
        }
    )
    editor.add_setting({"type": "colorpicker", "name": "Caret Color", "key": "theme.caret"})

    directory.create_panel(
        "About",
        {},
        {"allowDefaults": False},
        settings=[
            {"type": "header", "name": "Settings Service Demo"},
            {
                "type": "button",
                "name": "Log Store",
                "subLabel": "Writes the editor store to the log",
                "onClick": lambda: LOGGER.info("Editor store: %r", editor.store),
            },
        ],
    )
    return directory


def _make_surface(panel: SettingsPanel) -> SettingsView:
    return SettingsView(panel)


def main(existing_app: Optional[QApplication] = None, log_level: str = "INFO") -> DirectoryWindow:
    owns_app = existing_app is None
    app = existing_app or QApplication(sys.argv)
    configure_app_logging(log_level)
    app.setApplicationName("Settings Service")
    LOGGER.info("App main() starting (owns_app=%s)", owns_app)

    def _global_exception_hook(exc_type, exc_value, exc_tb) -> None:
        error_text = "".join(traceback.format_exception(exc_type, exc_value, exc_tb)).strip()
        LOGGER.error("Unhandled exception routed to global hook\n%s", error_text)
        sys.__excepthook__(exc_type, exc_value, exc_tb)

    sys.excepthook = _global_exception_hook

    directory = build_demo_directory()
    directory.initialize(_make_surface)
    window = DirectoryWindow(directory)
    # Views are top-level windows; keep the directory alive with the launcher.
    window.directory = directory  # type: ignore[attr-defined]
    LOGGER.info("Directory window created with panels: %s", ", ".join(directory.names()))

    if owns_app:
        window.show()
        LOGGER.info("Window shown by app.main() (standalone mode)")

    return window
