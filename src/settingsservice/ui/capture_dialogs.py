from __future__ import annotations

from collections.abc import Callable

from PySide6.QtGui import QColor
from PySide6.QtWidgets import QColorDialog, QDialog, QInputDialog, QLineEdit, QWidget

from ..core.definition import Color
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)


class QtCaptureProvider:
    """Non-modal text and color prompts for a settings surface.

    Only one prompt is tracked at a time; opening a new one leaves the
    previous dialog to finish on its own.
    """

    def __init__(self, parent: QWidget | None = None) -> None:
        self._parent = parent
        self.active_dialog: QDialog | None = None

    def _track(self, dialog: QDialog) -> None:
        self.active_dialog = dialog
        dialog.finished.connect(lambda _result: self._release(dialog))

    def _release(self, dialog: QDialog) -> None:
        if self.active_dialog is dialog:
            self.active_dialog = None
        dialog.deleteLater()

    def request_text_input(
        self,
        title: str,
        current_text: str,
        max_length: int,
        on_accept: Callable[[str], None],
        on_cancel: Callable[[], None] | None = None,
    ) -> QInputDialog:
        dialog = QInputDialog(self._parent)
        dialog.setWindowTitle(title or "Input")
        dialog.setLabelText(title)
        dialog.setInputMode(QInputDialog.InputMode.TextInput)
        dialog.setTextValue(str(current_text or "")[:max_length])
        line_edit = dialog.findChild(QLineEdit)
        if line_edit is not None:
            line_edit.setMaxLength(max_length)

        dialog.textValueSelected.connect(lambda text: on_accept(str(text)[:max_length]))
        if on_cancel is not None:
            dialog.rejected.connect(on_cancel)
        self._track(dialog)
        LOGGER.debug("Opened text prompt %r (max %d chars)", title, max_length)
        dialog.open()
        return dialog

    def request_color_input(
        self,
        title: str,
        current_color: Color,
        on_accept: Callable[[Color], None],
    ) -> QColorDialog:
        dialog = QColorDialog(QColor.fromRgbF(*current_color.as_tuple()), self._parent)
        dialog.setWindowTitle(title or "Select Color")
        dialog.setOption(QColorDialog.ColorDialogOption.ShowAlphaChannel, True)
        dialog.setOption(QColorDialog.ColorDialogOption.DontUseNativeDialog, True)

        def _selected(color: QColor) -> None:
            on_accept(Color(color.redF(), color.greenF(), color.blueF(), color.alphaF()))

        dialog.colorSelected.connect(_selected)
        self._track(dialog)
        LOGGER.debug("Opened color prompt %r", title)
        dialog.open()
        return dialog
