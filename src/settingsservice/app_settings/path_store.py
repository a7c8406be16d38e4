"""Dot-path access into a nested mapping.

The store is any mutable mapping supplied by the host. Nothing here knows
about settings; paths are plain ``"a.b.c"`` strings.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, MutableMapping
from typing import Any


class _Missing:
    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def split_path(path: str) -> list[str]:
    return [part for part in str(path or "").split(".") if part]


def get_path(root: Mapping[str, Any], path: str) -> Any:
    """Return the value at ``path`` or ``MISSING``.

    Hitting a non-mapping before the path is exhausted also yields
    ``MISSING`` instead of raising.
    """
    parts = split_path(path)
    if not parts:
        return MISSING
    current: Any = root
    for part in parts:
        if not isinstance(current, Mapping):
            return MISSING
        if part not in current:
            return MISSING
        current = current[part]
    return current


def set_path(root: MutableMapping[str, Any], path: str, value: Any) -> None:
    parts = split_path(path)
    if not parts:
        raise ValueError(f"Cannot write to an empty path: {path!r}")
    current = root
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, MutableMapping):
            child = {}
            current[part] = child
        current = child
    current[parts[-1]] = value


def apply_defaults(root: MutableMapping[str, Any], defaults: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Seed ``defaults`` into ``root`` without overwriting anything present."""
    for key, default in defaults.items():
        if isinstance(default, Mapping):
            existing = root.get(key, MISSING)
            if existing is MISSING:
                existing = {}
                root[key] = existing
            if isinstance(existing, MutableMapping):
                apply_defaults(existing, default)
            continue
        if key not in root:
            root[key] = copy.deepcopy(default)
    return root
