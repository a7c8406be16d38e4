from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .coercion import coerce_bool, coerce_int_clamped, coerce_text

DEFAULT_RESET_LABEL = "Reset to Defaults"
DEFAULT_TEXT_MAX_LENGTH = 256

_KEY_ALIASES: dict[str, str] = {
    "allowDefaults": "auto_defaults_action",
    "allow_defaults": "auto_defaults_action",
    "autoDefaultsAction": "auto_defaults_action",
    "allowRefresh": "auto_sync_on_write",
    "allow_refresh": "auto_sync_on_write",
    "autoSyncOnWrite": "auto_sync_on_write",
    "resetLabel": "reset_label",
    "maxChars": "text_max_length",
    "textMaxLength": "text_max_length",
}


@dataclass(slots=True)
class PanelConfig:
    auto_defaults_action: bool = False
    auto_sync_on_write: bool = False
    defaults: dict[str, Any] = field(default_factory=dict)
    reset_label: str = DEFAULT_RESET_LABEL
    text_max_length: int = DEFAULT_TEXT_MAX_LENGTH

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> "PanelConfig":
        raw: dict[str, Any] = {}
        if isinstance(mapping, Mapping):
            for key, value in mapping.items():
                raw[_KEY_ALIASES.get(str(key), str(key))] = value
        defaults = raw.get("defaults")
        return cls(
            auto_defaults_action=coerce_bool(raw.get("auto_defaults_action"), False),
            auto_sync_on_write=coerce_bool(raw.get("auto_sync_on_write"), False),
            defaults=copy.deepcopy(dict(defaults)) if isinstance(defaults, Mapping) else {},
            reset_label=coerce_text(raw.get("reset_label"), DEFAULT_RESET_LABEL).strip() or DEFAULT_RESET_LABEL,
            text_max_length=coerce_int_clamped(
                raw.get("text_max_length", DEFAULT_TEXT_MAX_LENGTH), DEFAULT_TEXT_MAX_LENGTH, 1, 4096
            ),
        )

    def to_mapping(self) -> dict[str, Any]:
        return {
            "auto_defaults_action": self.auto_defaults_action,
            "auto_sync_on_write": self.auto_sync_on_write,
            "defaults": copy.deepcopy(self.defaults),
            "reset_label": self.reset_label,
            "text_max_length": self.text_max_length,
        }
