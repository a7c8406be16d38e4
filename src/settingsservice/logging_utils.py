"""Logging setup and the settings diagnostics log.

Lookup misses, unknown kinds and failing host callbacks are reported as
WARNING/ERROR records on the ``settingsservice`` loggers. ``DiagnosticsLog``
keeps the most recent of them so a host window can list them.
"""

from __future__ import annotations

import logging
import sys
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

PACKAGE_LOGGER = "settingsservice"
LOG_LEVEL_OPTIONS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_LEVEL = "INFO"
DIAGNOSTICS_CAPACITY = 200
CONSOLE_FORMAT = "[%(levelname)s] [%(asctime)s] [%(name)s] %(message)s"
CONSOLE_DATE_FORMAT = "%H:%M:%S"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    created: float
    level: str
    source: str
    message: str

    def render(self) -> str:
        stamp = datetime.fromtimestamp(self.created).strftime(CONSOLE_DATE_FORMAT)
        return f"{stamp} {self.level.capitalize()}: {self.message} ({self.source})"


class DiagnosticsLog(logging.Handler):
    """Bounded list of WARNING-and-up records with change listeners."""

    def __init__(self, capacity: int = DIAGNOSTICS_CAPACITY) -> None:
        super().__init__(logging.WARNING)
        self._entries: deque[Diagnostic] = deque(maxlen=max(1, int(capacity)))
        self._listeners: list[Callable[[Diagnostic], None]] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = record.getMessage()
        except Exception:
            self.handleError(record)
            return
        entry = Diagnostic(record.created, record.levelname, record.name, message)
        self._entries.append(entry)
        for listener in list(self._listeners):
            listener(entry)

    def entries(self) -> list[Diagnostic]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def subscribe(self, listener: Callable[[Diagnostic], None]) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[[Diagnostic], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)


def normalize_log_level_name(value: object, default: str = DEFAULT_LOG_LEVEL) -> str:
    text = str(value or "").strip().upper()
    return text if text in LOG_LEVEL_OPTIONS else str(default).strip().upper()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def install_diagnostics(capacity: int = DIAGNOSTICS_CAPACITY) -> DiagnosticsLog:
    """Attach the diagnostics log to the package logger once and return it."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in package_logger.handlers:
        if isinstance(handler, DiagnosticsLog):
            return handler
    handler = DiagnosticsLog(capacity)
    package_logger.addHandler(handler)
    return handler


def configure_app_logging(level: object = DEFAULT_LOG_LEVEL) -> str:
    level_name = normalize_log_level_name(level)
    root_logger = logging.getLogger()
    if not any(getattr(h, "_settingsservice_console", False) for h in root_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler._settingsservice_console = True  # type: ignore[attr-defined]
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, CONSOLE_DATE_FORMAT))
        root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level_name))
    logging.captureWarnings(True)
    install_diagnostics()
    return level_name
