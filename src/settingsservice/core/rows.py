from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .definition import SettingKind

ROLE_VALUE = "value"
ROLE_LABEL = "label"
ROLE_SEPARATOR = "separator"
ROLE_ACTION = "action"


@dataclass(eq=False)
class RowHandle:
    """One rendered row.

    Rows point back at their definition by ``setting_id`` only. ``value`` and
    ``value_text`` are what the renderer paints; ``last_displayed`` is the
    change-detection snapshot compared against the store on every sync.
    ``view`` is an opaque slot owned by the renderer (a list item, a widget).
    """

    setting_id: int
    kind: SettingKind | str
    role: str = ROLE_VALUE
    text: str = ""
    sub_label: str | None = None
    tooltip: str | None = None
    interactive: bool = True
    value: Any = None
    value_text: str = ""
    last_displayed: Any = None
    view: Any = None

    def __repr__(self) -> str:
        return f"RowHandle(setting_id={self.setting_id}, role={self.role!r}, text={self.text!r}, value_text={self.value_text!r})"
