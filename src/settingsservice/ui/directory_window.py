from __future__ import annotations

from PySide6.QtWidgets import QLabel, QListWidget, QListWidgetItem, QPlainTextEdit, QVBoxLayout, QWidget

from ..core.directory import PanelDirectory
from ..logging_utils import DIAGNOSTICS_CAPACITY, Diagnostic, DiagnosticsLog, get_logger, install_diagnostics

LOGGER = get_logger(__name__)


class DirectoryWindow(QWidget):
    """Alphabetical list of registered panels; activating one toggles it.

    Below the list, recent settings diagnostics (unknown references, unknown
    kinds, failing callbacks) are shown as they are logged.
    """

    def __init__(
        self,
        directory: PanelDirectory,
        parent: QWidget | None = None,
        diagnostics: DiagnosticsLog | None = None,
    ) -> None:
        super().__init__(parent)
        self._directory = directory
        self._diagnostics = diagnostics if diagnostics is not None else install_diagnostics()
        self.setWindowTitle("Settings")
        self.resize(320, 460)

        layout = QVBoxLayout(self)
        layout.addWidget(QLabel("Registered panels", self))
        self.list_widget = QListWidget(self)
        self.list_widget.itemActivated.connect(self._on_item_activated)
        layout.addWidget(self.list_widget, 2)

        layout.addWidget(QLabel("Diagnostics", self))
        self.diagnostics_view = QPlainTextEdit(self)
        self.diagnostics_view.setReadOnly(True)
        self.diagnostics_view.setMaximumBlockCount(DIAGNOSTICS_CAPACITY)
        layout.addWidget(self.diagnostics_view, 1)

        self.reload()
        self.reload_diagnostics()
        diagnostics_log = self._diagnostics
        listener = self._append_diagnostic
        diagnostics_log.subscribe(listener)
        self.destroyed.connect(lambda *_args: diagnostics_log.unsubscribe(listener))

    def reload(self) -> None:
        self.list_widget.clear()
        for name in self._directory.names():
            self.list_widget.addItem(QListWidgetItem(name))

    def reload_diagnostics(self) -> None:
        self.diagnostics_view.setPlainText("\n".join(entry.render() for entry in self._diagnostics.entries()))

    def _append_diagnostic(self, entry: Diagnostic) -> None:
        self.diagnostics_view.appendPlainText(entry.render())

    def _on_item_activated(self, item: QListWidgetItem) -> None:
        panel = self._directory.get(item.text())
        if panel is None:
            LOGGER.warning("Panel %r disappeared from the directory", item.text())
            self.reload()
            return
        panel.toggle()
