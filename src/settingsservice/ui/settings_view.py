from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QColor, QFont, QIcon, QPixmap
from PySide6.QtWidgets import QLabel, QListWidget, QListWidgetItem, QVBoxLayout, QWidget

from ..core.definition import Color, SettingKind
from ..core.rows import ROLE_ACTION, ROLE_LABEL, ROLE_SEPARATOR, RowHandle
from ..logging_utils import get_logger

if TYPE_CHECKING:
    from ..core.panel import SettingsPanel

LOGGER = get_logger(__name__)

_ACTIVATE_KEYS = {Qt.Key.Key_Return, Qt.Key.Key_Enter, Qt.Key.Key_Space}
SWATCH_SIZE = 16


def format_row_text(row: RowHandle) -> str:
    if row.role == ROLE_SEPARATOR:
        return ""
    if row.role in (ROLE_LABEL, ROLE_ACTION):
        return f"{row.text}\n{row.sub_label}" if row.sub_label else row.text
    if row.kind in (SettingKind.CHOICE, SettingKind.IMAGE_CHOICE):
        return f"{row.text}: < {row.value_text} >"
    return f"{row.text}: {row.value_text}"


def color_swatch(color: Color) -> QIcon:
    pixmap = QPixmap(SWATCH_SIZE, SWATCH_SIZE)
    pixmap.fill(QColor.fromRgbF(color.r, color.g, color.b, color.a))
    return QIcon(pixmap)


class _SettingsListWidget(QListWidget):
    def __init__(self, view: "SettingsView") -> None:
        super().__init__(view)
        self._view = view

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        key = event.key()
        if key in _ACTIVATE_KEYS:
            self._view.activate_current()
            event.accept()
            return
        if key == Qt.Key.Key_Left:
            self._view.step_current(-1)
            event.accept()
            return
        if key == Qt.Key.Key_Right:
            self._view.step_current(1)
            event.accept()
            return
        super().keyPressEvent(event)


class SettingsView(QWidget):
    """List-based surface for one settings panel.

    ``rebuild`` recreates every item; ``commit_visible`` only rewrites the
    existing items so the current row and scroll position stay put.
    """

    def __init__(self, panel: "SettingsPanel", parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._panel = panel
        self._rows: list[RowHandle] = []
        self.setWindowTitle(panel.name)
        self.resize(520, 640)

        layout = QVBoxLayout(self)
        self.title_label = QLabel(panel.name, self)
        title_font = self.title_label.font()
        title_font.setPointSize(title_font.pointSize() + 4)
        title_font.setBold(True)
        self.title_label.setFont(title_font)
        layout.addWidget(self.title_label)

        self.list_widget = _SettingsListWidget(self)
        self.list_widget.setIconSize(QSize(SWATCH_SIZE, SWATCH_SIZE))
        self.list_widget.itemDoubleClicked.connect(self._on_item_double_clicked)
        layout.addWidget(self.list_widget, 1)

        self.hint_label = QLabel("Enter: change    Left/Right: adjust", self)
        layout.addWidget(self.hint_label)

    @property
    def panel(self) -> "SettingsPanel":
        return self._panel

    @property
    def rows(self) -> list[RowHandle]:
        return list(self._rows)

    # -- surface contract ----------------------------------------------

    def rebuild(self, rows: Sequence[RowHandle]) -> None:
        self.list_widget.clear()
        self._rows = list(rows)
        for row in self._rows:
            item = QListWidgetItem()
            self._apply_row(item, row)
            row.view = item
            self.list_widget.addItem(item)
        LOGGER.debug("SettingsView %r rebuilt with %d row(s)", self._panel.name, len(self._rows))

    def commit_visible(self) -> None:
        for row in self._rows:
            if isinstance(row.view, QListWidgetItem):
                self._apply_row(row.view, row)

    def is_surface_visible(self) -> bool:
        return self.isVisible()

    def showEvent(self, event) -> None:  # type: ignore[override]
        super().showEvent(event)
        self._panel.surface_shown()

    # -- rows ----------------------------------------------------------

    def row_at(self, index: int) -> RowHandle | None:
        if 0 <= index < len(self._rows):
            return self._rows[index]
        return None

    def current_row_handle(self) -> RowHandle | None:
        return self.row_at(self.list_widget.currentRow())

    def activate_current(self) -> None:
        row = self.current_row_handle()
        if row is not None and row.interactive:
            self._panel.activate(row)

    def step_current(self, delta: int) -> None:
        row = self.current_row_handle()
        if row is not None and row.interactive:
            self._panel.step(row, delta)

    def _on_item_double_clicked(self, item: QListWidgetItem) -> None:
        row = self.row_at(self.list_widget.row(item))
        if row is not None and row.interactive:
            self._panel.activate(row)

    def _apply_row(self, item: QListWidgetItem, row: RowHandle) -> None:
        item.setText(format_row_text(row))
        item.setToolTip(row.tooltip or "")
        if row.role == ROLE_SEPARATOR:
            item.setFlags(Qt.ItemFlag.NoItemFlags)
            item.setSizeHint(QSize(0, 8))
            return
        if row.role == ROLE_LABEL:
            item.setFlags(Qt.ItemFlag.ItemIsEnabled)
            font = QFont(item.font())
            font.setBold(True)
            item.setFont(font)
            return
        item.setFlags(Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable)
        if row.kind == SettingKind.TOGGLE:
            item.setCheckState(Qt.CheckState.Checked if row.value else Qt.CheckState.Unchecked)
        elif row.kind == SettingKind.COLOR and isinstance(row.value, Color):
            item.setIcon(color_swatch(row.value))
        elif row.kind == SettingKind.IMAGE_CHOICE:
            item.setIcon(QIcon(str(row.value)) if row.value else QIcon())
