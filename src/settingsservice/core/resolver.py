from __future__ import annotations

import copy
from collections.abc import MutableMapping
from typing import Any

from ..app_settings.path_store import MISSING, get_path, set_path
from .definition import Color, SettingDefinition, SettingKind


def is_absent(value: Any) -> bool:
    return value is MISSING or value is None


def storable_default(definition: SettingDefinition) -> Any:
    """A fresh copy of ``default_value`` in the shape the store keeps for its kind."""
    if definition.kind == SettingKind.COLOR and definition.default_value is not None:
        return Color.from_value(definition.default_value).to_mapping()
    return copy.deepcopy(definition.default_value)


def read_value(definition: SettingDefinition, store: MutableMapping[str, Any]) -> Any:
    if definition.uses_accessors:
        return definition.get_value()  # type: ignore[misc]
    if definition.path:
        value = get_path(store, definition.path)
        return definition.default_value if is_absent(value) else value
    return definition.default_value


def write_value(definition: SettingDefinition, store: MutableMapping[str, Any], value: Any) -> None:
    if definition.uses_accessors:
        definition.set_value(value)  # type: ignore[misc]
    elif definition.path:
        set_path(store, definition.path, value)


def seed_default(definition: SettingDefinition, store: MutableMapping[str, Any]) -> bool:
    """Write ``default_value`` once, only for path mode and only when absent."""
    if definition.uses_accessors or definition.get_value is not None:
        return False
    if not definition.path or definition.default_value is None:
        return False
    if not is_absent(get_path(store, definition.path)):
        return False
    set_path(store, definition.path, storable_default(definition))
    return True
