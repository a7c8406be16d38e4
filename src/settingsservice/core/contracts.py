from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .rows import RowHandle


class SettingsSurface(Protocol):
    """What the core needs from whatever paints a panel.

    ``rebuild`` discards every row and lays out ``rows`` in order (scroll
    position may reset). ``commit_visible`` repaints the existing rows from
    their current fields and must keep scroll and selection where they are.
    """

    def rebuild(self, rows: Sequence[RowHandle]) -> None: ...

    def commit_visible(self) -> None: ...

    def is_surface_visible(self) -> bool: ...

    def show(self) -> None: ...

    def hide(self) -> None: ...
