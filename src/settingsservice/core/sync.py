"""Display synchronization: full rebuilds versus targeted repaints.

The engine keeps a map from definition id to the rows built for it. The map
is replaced wholesale on every full rebuild, so rows of removed definitions
simply disappear with it. Targeted refreshes re-read values, update rows in
place and ask the surface for a single repaint of what is on screen.
"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any

from ..app_settings.config import DEFAULT_TEXT_MAX_LENGTH
from ..logging_utils import get_logger
from .definition import SettingDefinition
from .kinds import KindBehaviour, behaviour_for
from .registry import SettingRegistry
from .resolver import read_value, write_value
from .rows import RowHandle

if TYPE_CHECKING:
    from .capture import CaptureProvider
    from .contracts import SettingsSurface

LOGGER = get_logger(__name__)


class DisplaySyncEngine:
    def __init__(
        self,
        registry: SettingRegistry,
        *,
        auto_sync_on_write: bool = False,
        capture: "CaptureProvider | None" = None,
        text_max_length: int = DEFAULT_TEXT_MAX_LENGTH,
    ) -> None:
        self._registry = registry
        self._surface: "SettingsSurface | None" = None
        self._rows_by_id: dict[int, list[RowHandle]] = {}
        self._rows: list[RowHandle] = []
        self.auto_sync_on_write = auto_sync_on_write
        self.capture = capture
        self.text_max_length = text_max_length

    # -- state ---------------------------------------------------------

    @property
    def store(self) -> MutableMapping[str, Any]:
        return self._registry.store

    @property
    def surface(self) -> "SettingsSurface | None":
        return self._surface

    @property
    def rows(self) -> tuple[RowHandle, ...]:
        return tuple(self._rows)

    def attach_surface(self, surface: "SettingsSurface") -> None:
        self._surface = surface
        self.full_rebuild()

    def detach_surface(self) -> None:
        self._surface = None
        self._clear_rows()

    def is_surface_visible(self) -> bool:
        return self._surface is not None and bool(self._surface.is_surface_visible())

    def rows_for(self, ref: object) -> list[RowHandle]:
        definition = self._registry.resolve(ref)
        if definition is None:
            return []
        return list(self._rows_by_id.get(definition.setting_id, []))

    def _clear_rows(self) -> None:
        self._rows_by_id = {}
        self._rows = []

    # -- value access used by kind strategies --------------------------

    def read(self, definition: SettingDefinition) -> Any:
        return read_value(definition, self._registry.store)

    def write(self, definition: SettingDefinition, value: Any) -> None:
        write_value(definition, self._registry.store, value)

    # -- building ------------------------------------------------------

    def build(self, definition: SettingDefinition) -> list[RowHandle]:
        behaviour = behaviour_for(definition.kind)
        if behaviour is None:
            LOGGER.warning(
                "Unknown control kind %r for setting %r in %r; skipped",
                definition.kind,
                definition.name,
                self._registry.owner_name,
            )
            return []
        return behaviour.build_rows(self, definition)

    def full_rebuild(self) -> bool:
        if not self.is_surface_visible():
            # Rows are rebuilt when the surface shows; drop stale ones now.
            self._clear_rows()
            return False
        rows_by_id: dict[int, list[RowHandle]] = {}
        ordered: list[RowHandle] = []
        for definition in self._registry:
            rows = self.build(definition)
            if not rows:
                continue
            rows_by_id[definition.setting_id] = rows
            ordered.extend(rows)
        self._rows_by_id = rows_by_id
        self._rows = ordered
        LOGGER.debug("Full rebuild of %r: %d row(s)", self._registry.owner_name, len(ordered))
        self._surface.rebuild(list(ordered))  # type: ignore[union-attr]
        return True

    # -- dirty checking ------------------------------------------------

    def _row_target(self, row: RowHandle) -> tuple[SettingDefinition, KindBehaviour] | None:
        definition = self._registry.get_by_id(row.setting_id)
        if definition is None:
            return None
        behaviour = behaviour_for(definition.kind)
        if behaviour is None:
            return None
        return definition, behaviour

    def sync_one(self, row: RowHandle) -> bool:
        target = self._row_target(row)
        if target is None:
            return False
        definition, behaviour = target
        return behaviour.sync(self, definition, row)

    def refresh_one(self, ref: object) -> bool:
        definition = self._registry.resolve(ref)
        if definition is None:
            LOGGER.warning("RefreshSetting: %r not found in %r", ref, self._registry.owner_name)
            return False
        if not self.is_surface_visible():
            return False
        dirty = False
        for row in self._rows_by_id.get(definition.setting_id, []):
            if self.sync_one(row):
                dirty = True
        if dirty:
            self._surface.commit_visible()  # type: ignore[union-attr]
        return dirty

    def refresh_all(self) -> bool:
        if not self.is_surface_visible():
            return False
        dirty = False
        for rows in list(self._rows_by_id.values()):
            for row in rows:
                if self.sync_one(row):
                    dirty = True
        if dirty:
            self._surface.commit_visible()  # type: ignore[union-attr]
        return dirty

    def on_written_by_user(self, row: RowHandle) -> None:
        # The writing kind already refreshed the row's fields and snapshot.
        if self.auto_sync_on_write:
            if self.is_surface_visible():
                self._surface.commit_visible()  # type: ignore[union-attr]
            return
        self.full_rebuild()

    # -- user interaction entry points for renderers -------------------

    def _interactive_target(self, row: RowHandle, action: str) -> tuple[SettingDefinition, KindBehaviour] | None:
        target = self._row_target(row)
        if target is None:
            LOGGER.warning("%s: row %r no longer maps to a setting in %r", action, row, self._registry.owner_name)
            return None
        if not row.interactive:
            return None
        return target

    def activate(self, row: RowHandle) -> None:
        target = self._interactive_target(row, "Activate")
        if target is not None:
            definition, behaviour = target
            behaviour.activate(self, definition, row)

    def step(self, row: RowHandle, delta: int) -> None:
        target = self._interactive_target(row, "Step")
        if target is not None:
            definition, behaviour = target
            behaviour.step(self, definition, row, delta)

    def set_row_value(self, row: RowHandle, value: Any) -> None:
        target = self._interactive_target(row, "SetValue")
        if target is not None:
            definition, behaviour = target
            behaviour.set_value(self, definition, row, value)
