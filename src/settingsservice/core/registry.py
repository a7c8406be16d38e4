from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, MutableMapping
from dataclasses import fields
from typing import Any

from ..logging_utils import get_logger
from .definition import STORAGE_FIELDS, SettingDefinition
from .errors import ConfigurationError
from .resolver import seed_default, storable_default, write_value

LOGGER = get_logger(__name__)


def as_definition(value: SettingDefinition | Mapping[str, Any]) -> SettingDefinition:
    if isinstance(value, SettingDefinition):
        return value
    if isinstance(value, Mapping):
        return SettingDefinition.from_mapping(value)
    raise ConfigurationError(f"Expected a SettingDefinition or mapping, got {type(value).__name__}")


class SettingRegistry:
    """Ordered definitions of one panel plus their structural operations.

    References accepted by ``find``/``remove``/``update`` are a definition
    (matched by identity), a handle or anything else carrying a
    ``setting_id``, or a name string (first match in order wins).
    ``on_changed`` fires after every structural change so the owner can
    schedule a full rebuild.
    """

    def __init__(
        self,
        store: MutableMapping[str, Any],
        *,
        on_changed: Callable[[], None] | None = None,
        owner_name: str = "",
    ) -> None:
        if not isinstance(store, MutableMapping):
            raise ConfigurationError(f"Settings store must be a mutable mapping, got {type(store).__name__}")
        self._store = store
        self._definitions: list[SettingDefinition] = []
        self._on_changed = on_changed
        self.owner_name = owner_name

    @property
    def store(self) -> MutableMapping[str, Any]:
        return self._store

    @property
    def definitions(self) -> tuple[SettingDefinition, ...]:
        return tuple(self._definitions)

    def __iter__(self) -> Iterator[SettingDefinition]:
        return iter(list(self._definitions))

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, ref: object) -> bool:
        return self.find(ref)[1] is not None

    def _notify(self) -> None:
        if self._on_changed is not None:
            self._on_changed()

    def find(self, ref: object) -> tuple[int | None, SettingDefinition | None]:
        if isinstance(ref, SettingDefinition):
            for idx, definition in enumerate(self._definitions):
                if definition is ref:
                    return idx, definition
            return None, None
        if isinstance(ref, str):
            for idx, definition in enumerate(self._definitions):
                if definition.name == ref:
                    return idx, definition
            return None, None
        setting_id = getattr(ref, "setting_id", None)
        if isinstance(setting_id, int):
            for idx, definition in enumerate(self._definitions):
                if definition.setting_id == setting_id:
                    return idx, definition
        return None, None

    def resolve(self, ref: object) -> SettingDefinition | None:
        return self.find(ref)[1]

    def get(self, name: str) -> SettingDefinition | None:
        return self.find(name)[1] if isinstance(name, str) else None

    def get_by_id(self, setting_id: int) -> SettingDefinition | None:
        for definition in self._definitions:
            if definition.setting_id == setting_id:
                return definition
        return None

    def _defaults_action_index(self) -> int | None:
        for idx, definition in enumerate(self._definitions):
            if definition.is_defaults_action:
                return idx
        return None

    def add(self, definition: SettingDefinition | Mapping[str, Any], after_name: str | None = None) -> SettingDefinition:
        definition = as_definition(definition)
        definition.validate()
        if self.find(definition)[1] is not None:
            raise ConfigurationError(f"Setting {definition.name!r} is already registered in {self.owner_name!r}")
        seed_default(definition, self._store)

        position = None
        if after_name is not None:
            idx, _found = self.find(after_name)
            if idx is not None:
                position = idx + 1
        if position is None and not definition.is_defaults_action:
            position = self._defaults_action_index()
        if position is None:
            self._definitions.append(definition)
        else:
            self._definitions.insert(position, definition)

        LOGGER.debug("Added setting %r to %r at %s", definition.name, self.owner_name, position)
        self._notify()
        return definition

    def remove(self, ref: object) -> SettingDefinition | None:
        idx, definition = self.find(ref)
        if idx is None or definition is None:
            LOGGER.warning("RemoveSetting: %r not found in %r", ref, self.owner_name)
            return None
        del self._definitions[idx]
        LOGGER.debug("Removed setting %r from %r", definition.name, self.owner_name)
        self._notify()
        return definition

    def update(self, ref: object, changes: Mapping[str, Any]) -> SettingDefinition | None:
        if not isinstance(changes, Mapping):
            raise ConfigurationError("UpdateSetting: changes must be a mapping")
        _idx, definition = self.find(ref)
        if definition is None:
            LOGGER.warning("UpdateSetting: %r not found in %r", ref, self.owner_name)
            return None

        previous = {f.name: getattr(definition, f.name) for f in fields(definition)}
        previous["metadata"] = dict(definition.metadata)
        touched = definition.apply_changes(changes)
        try:
            definition.validate()
        except ConfigurationError:
            for name, value in previous.items():
                setattr(definition, name, value)
            raise

        if touched & STORAGE_FIELDS:
            seed_default(definition, self._store)
        LOGGER.debug("Updated setting %r in %r: %s", definition.name, self.owner_name, sorted(touched))
        self._notify()
        return definition

    def reset_to_defaults(self) -> int:
        written = 0
        for definition in list(self._definitions):
            if definition.is_defaults_action or definition.default_value is None:
                continue
            write_value(definition, self._store, storable_default(definition))
            written += 1
        LOGGER.info("Reset %d setting(s) to defaults in %r", written, self.owner_name)
        self._notify()
        return written
