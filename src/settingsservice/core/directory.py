from __future__ import annotations

from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any

from ..app_settings.config import PanelConfig
from ..logging_utils import get_logger
from .panel import SettingsPanel, SurfaceFactory

LOGGER = get_logger(__name__)


class PanelDirectory:
    """All panels a host has registered, listed alphabetically.

    Surfaces are built lazily: nothing is constructed until ``initialize``
    runs, and a panel shown before that keeps its show request pending
    until its surface exists.
    """

    def __init__(self) -> None:
        self._panels: list[SettingsPanel] = []
        self._surface_factory: SurfaceFactory | None = None

    def __len__(self) -> int:
        return len(self._panels)

    def __iter__(self) -> Iterator[SettingsPanel]:
        return iter(self.panels())

    def __contains__(self, panel: object) -> bool:
        if isinstance(panel, str):
            return self.get(panel) is not None
        return any(existing is panel for existing in self._panels)

    @property
    def initialized(self) -> bool:
        return self._surface_factory is not None

    def create_panel(
        self,
        name: str,
        store: MutableMapping[str, Any] | None = None,
        config: PanelConfig | Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> SettingsPanel:
        panel = SettingsPanel(name, store, config, **kwargs)
        self.register(panel)
        return panel

    def register(self, panel: SettingsPanel) -> SettingsPanel:
        if panel in self:
            return panel
        if self.get(panel.name) is not None:
            LOGGER.warning("A panel named %r is already registered; lookups by name return the first", panel.name)
        self._panels.append(panel)
        if self._surface_factory is not None and not panel.has_surface:
            panel.attach_surface(self._surface_factory(panel))
        return panel

    def unregister(self, ref: SettingsPanel | str) -> SettingsPanel | None:
        panel = self.get(ref) if isinstance(ref, str) else (ref if ref in self else None)
        if panel is None:
            LOGGER.warning("Unregister: panel %r not found", ref)
            return None
        self._panels = [existing for existing in self._panels if existing is not panel]
        panel.detach_surface()
        return panel

    def get(self, name: str) -> SettingsPanel | None:
        for panel in self._panels:
            if panel.name == name:
                return panel
        return None

    def panels(self) -> list[SettingsPanel]:
        return sorted(self._panels, key=lambda panel: panel.name)

    def names(self) -> list[str]:
        return [panel.name for panel in self.panels()]

    def initialize(self, surface_factory: SurfaceFactory) -> None:
        if self._surface_factory is not None:
            return
        self._surface_factory = surface_factory
        for panel in list(self._panels):
            if not panel.has_surface:
                panel.attach_surface(surface_factory(panel))
        LOGGER.info("Settings directory initialized with %d panel(s)", len(self._panels))

    def close(self) -> None:
        for panel in self._panels:
            panel.detach_surface()
        self._panels = []
        self._surface_factory = None
