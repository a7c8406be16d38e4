import argparse
import sys
import traceback
from pathlib import Path

from PySide6.QtCore import QtMsgType, qInstallMessageHandler
from PySide6.QtWidgets import QApplication

_MAIN_WINDOW = None

# --- Add ROOT for imports ---
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from settingsservice.app import main
from settingsservice.logging_utils import LOG_LEVEL_OPTIONS, configure_app_logging, get_logger

LOGGER = get_logger(__name__)


def _install_qt_message_handler() -> None:
    def _qt_message_handler(mode, context, message) -> None:
        mode_name = mode.name if isinstance(mode, QtMsgType) else str(mode)
        location = ""
        if context is not None and context.file:
            location = f" ({context.file}:{context.line})"
        LOGGER.warning("[Qt:%s]%s %s", mode_name, location, message)

    qInstallMessageHandler(_qt_message_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(add_help=True, description="Settings service demo")
    parser.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=LOG_LEVEL_OPTIONS,
        help="Console log level (default: INFO).",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Open the Editor demo panel right away instead of only the panel list.",
    )
    return parser


if __name__ == "__main__":
    parsed_args, qt_args = build_parser().parse_known_args(sys.argv[1:])
    level = configure_app_logging(parsed_args.log_level)
    LOGGER.debug("Parsed startup args: parsed=%s qt=%s level=%s", parsed_args, qt_args, level)

    _install_qt_message_handler()
    app = QApplication([sys.argv[0], *qt_args])
    app.setQuitOnLastWindowClosed(True)
    LOGGER.info("QApplication created")

    try:
        window = main(existing_app=app, log_level=level)
    except Exception:
        LOGGER.error("Main window bootstrap failed\n%s", traceback.format_exc())
        sys.exit(1)
    # Keep a strong reference so Qt doesn't destroy the window.
    _MAIN_WINDOW = window
    window.show()
    if parsed_args.demo:
        editor = window.directory.get("Editor")
        if editor is not None:
            editor.show()

    exit_code = app.exec()
    LOGGER.info("Qt event loop exited with code %s", exit_code)
    sys.exit(exit_code)
