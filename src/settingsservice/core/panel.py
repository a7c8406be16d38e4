from __future__ import annotations

import weakref
from collections.abc import Callable, Iterable, Mapping, MutableMapping
from typing import TYPE_CHECKING, Any

from ..app_settings.config import PanelConfig
from ..app_settings.path_store import apply_defaults
from ..logging_utils import get_logger
from .definition import SettingDefinition, SettingKind
from .errors import ConfigurationError
from .registry import SettingRegistry, as_definition
from .rows import RowHandle
from .sync import DisplaySyncEngine

if TYPE_CHECKING:
    from .capture import CaptureProvider
    from .contracts import SettingsSurface

LOGGER = get_logger(__name__)

SurfaceFactory = Callable[["SettingsPanel"], "SettingsSurface"]


class SettingHandle:
    """What ``add_setting`` gives back to the host.

    Holds the panel weakly and the definition by id only; ``refresh`` is a
    silent no-op once the panel is gone or before it has a surface.
    """

    def __init__(self, panel: "SettingsPanel", definition: SettingDefinition) -> None:
        self._panel_ref = weakref.ref(panel)
        self.setting_id = definition.setting_id
        self.name = definition.name

    @property
    def panel(self) -> "SettingsPanel | None":
        return self._panel_ref()

    @property
    def definition(self) -> SettingDefinition | None:
        panel = self._panel_ref()
        if panel is None:
            return None
        return panel.registry.get_by_id(self.setting_id)

    def refresh(self) -> None:
        panel = self._panel_ref()
        if panel is None or not panel.has_surface:
            return
        panel.refresh_setting(self)

    def __repr__(self) -> str:
        return f"SettingHandle(setting_id={self.setting_id}, name={self.name!r})"


class SettingsPanel:
    def __init__(
        self,
        name: str,
        store: MutableMapping[str, Any] | None = None,
        config: PanelConfig | Mapping[str, Any] | None = None,
        *,
        settings: Iterable[SettingDefinition | Mapping[str, Any]] = (),
        capture: "CaptureProvider | None" = None,
        surface_factory: SurfaceFactory | None = None,
    ) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ConfigurationError("Panel name must be a non-empty string")
        if store is None:
            store = {}
        if not isinstance(store, MutableMapping):
            raise ConfigurationError(f"Settings store must be a mutable mapping, got {type(store).__name__}")
        self.config = config if isinstance(config, PanelConfig) else PanelConfig.from_mapping(config)
        self.name = name
        self._store = store
        self._surface_factory = surface_factory
        self._pending_show = False

        apply_defaults(store, self.config.defaults)
        self.registry = SettingRegistry(store, on_changed=self._on_structure_changed, owner_name=name)
        self.engine = DisplaySyncEngine(
            self.registry,
            auto_sync_on_write=self.config.auto_sync_on_write,
            capture=capture,
            text_max_length=self.config.text_max_length,
        )
        for item in settings:
            self.registry.add(as_definition(item).copy())
        if self.config.auto_defaults_action:
            self.registry.add(
                SettingDefinition(
                    kind=SettingKind.ACTION,
                    name=self.config.reset_label,
                    on_activate=self.reset_to_defaults,
                    is_defaults_action=True,
                )
            )
        LOGGER.info("Created settings panel %r with %d setting(s)", name, len(self.registry))

    def __repr__(self) -> str:
        return f"SettingsPanel(name={self.name!r}, settings={len(self.registry)})"

    # -- state ---------------------------------------------------------

    @property
    def store(self) -> MutableMapping[str, Any]:
        return self._store

    @property
    def definitions(self) -> tuple[SettingDefinition, ...]:
        return self.registry.definitions

    @property
    def surface(self) -> "SettingsSurface | None":
        return self.engine.surface

    @property
    def has_surface(self) -> bool:
        return self.engine.surface is not None

    @property
    def pending_show(self) -> bool:
        return self._pending_show

    def is_showing(self) -> bool:
        return self.engine.is_surface_visible()

    def _on_structure_changed(self) -> None:
        self.engine.full_rebuild()

    # -- setting management --------------------------------------------

    def add_setting(
        self,
        definition: SettingDefinition | Mapping[str, Any],
        after_name: str | None = None,
    ) -> SettingHandle:
        added = self.registry.add(definition, after_name)
        return SettingHandle(self, added)

    def handle_for(self, ref: object) -> SettingHandle | None:
        definition = self.registry.resolve(ref)
        return SettingHandle(self, definition) if definition is not None else None

    def remove_setting(self, ref: object) -> SettingDefinition | None:
        return self.registry.remove(ref)

    def update_setting(self, ref: object, changes: Mapping[str, Any]) -> SettingDefinition | None:
        return self.registry.update(ref, changes)

    def get_setting(self, name: str) -> SettingDefinition | None:
        return self.registry.get(name)

    def reset_to_defaults(self) -> None:
        self.registry.reset_to_defaults()

    # -- refresh -------------------------------------------------------

    def refresh_setting(self, ref: object) -> bool:
        if not self.has_surface:
            return False
        return self.engine.refresh_one(ref)

    def refresh_all(self) -> bool:
        if not self.has_surface:
            return False
        return self.engine.refresh_all()

    # -- surface -------------------------------------------------------

    def attach_surface(self, surface: "SettingsSurface") -> None:
        self.engine.attach_surface(surface)
        if self._pending_show:
            self._pending_show = False
            surface.show()

    def detach_surface(self) -> "SettingsSurface | None":
        surface = self.engine.surface
        self.engine.detach_surface()
        return surface

    def ensure_surface(self) -> "SettingsSurface | None":
        if self.engine.surface is None and self._surface_factory is not None:
            self.attach_surface(self._surface_factory(self))
        return self.engine.surface

    def surface_shown(self) -> None:
        """Called by the surface when it becomes visible."""
        self.engine.full_rebuild()

    def show(self) -> None:
        surface = self.ensure_surface()
        if surface is None:
            # No surface yet; shown once one is attached.
            self._pending_show = True
            return
        surface.show()

    def hide(self) -> None:
        self._pending_show = False
        surface = self.engine.surface
        if surface is not None:
            surface.hide()

    def toggle(self) -> None:
        surface = self.engine.surface
        if surface is not None and surface.is_surface_visible():
            self.hide()
        else:
            self.show()

    # -- row interaction (called by renderers) -------------------------

    def activate(self, row: RowHandle) -> None:
        self.engine.activate(row)

    def step(self, row: RowHandle, delta: int) -> None:
        self.engine.step(row, delta)

    def set_row_value(self, row: RowHandle, value: Any) -> None:
        self.engine.set_row_value(row, value)
