"""Setting definitions: what one row of a settings panel is made of."""

from __future__ import annotations

import enum
import itertools
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields, replace
from typing import Any

from ..app_settings.coercion import coerce_color
from ..app_settings.path_store import split_path
from .errors import ConfigurationError

_setting_ids = itertools.count(1)


def _next_setting_id() -> int:
    return next(_setting_ids)


class SettingKind(str, enum.Enum):
    TOGGLE = "toggle"
    NUMERIC = "numeric"
    CHOICE = "choice"
    COLOR = "color"
    TEXT = "text"
    IMAGE_CHOICE = "image_choice"
    ACTION = "action"
    LABEL = "label"
    SEPARATOR = "separator"

    @classmethod
    def parse(cls, value: object) -> "SettingKind | str | None":
        """Map a kind or tag to the enum; unknown tags come back as raw strings."""
        if value is None:
            return None
        if isinstance(value, SettingKind):
            return value
        text = str(value).strip().lower()
        if not text:
            return None
        alias = KIND_ALIASES.get(text)
        if alias is not None:
            return alias
        try:
            return cls(text)
        except ValueError:
            return str(value).strip()


KIND_ALIASES: dict[str, SettingKind] = {
    "checkbox": SettingKind.TOGGLE,
    "boolean": SettingKind.TOGGLE,
    "slider": SettingKind.NUMERIC,
    "dropdown": SettingKind.CHOICE,
    "colorpicker": SettingKind.COLOR,
    "textbox": SettingKind.TEXT,
    "edit": SettingKind.TEXT,
    "iconchooser": SettingKind.IMAGE_CHOICE,
    "button": SettingKind.ACTION,
    "header": SettingKind.LABEL,
    "section": SettingKind.LABEL,
    "divider": SettingKind.SEPARATOR,
}

NON_INTERACTIVE_KINDS = frozenset({SettingKind.LABEL, SettingKind.SEPARATOR})

DEFAULT_NUMERIC_MIN = 0
DEFAULT_NUMERIC_MAX = 100
DEFAULT_NUMERIC_STEP = 1


@dataclass(frozen=True, slots=True)
class Color:
    r: float
    g: float
    b: float
    a: float = 1.0

    @classmethod
    def from_value(cls, value: object, default: "Color | None" = None) -> "Color":
        if isinstance(value, Color):
            return value
        fallback = default.as_tuple() if default is not None else None
        return cls(*coerce_color(value, fallback))

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.r, self.g, self.b, self.a)

    def to_mapping(self) -> dict[str, float]:
        return {"r": self.r, "g": self.g, "b": self.b, "a": self.a}

    def key(self) -> str:
        # Fixed precision so independently quantized channel edits compare equal.
        return "{:.4f}:{:.4f}:{:.4f}:{:.4f}".format(self.r, self.g, self.b, self.a)

    def to_hex(self) -> str:
        return "#" + "".join(f"{round(c * 255):02x}" for c in (self.r, self.g, self.b))


WHITE = Color(1.0, 1.0, 1.0, 1.0)

_FIELD_ALIASES: dict[str, str] = {
    "type": "kind",
    "key": "path",
    "default": "default_value",
    "defaultValue": "default_value",
    "getFunction": "get_value",
    "getValue": "get_value",
    "setFunction": "set_value",
    "setValue": "set_value",
    "onChange": "on_change",
    "onClick": "on_activate",
    "on_click": "on_activate",
    "onActivate": "on_activate",
    "options": "choices",
    "values": "choices",
    "icons": "images",
    "maxChars": "max_length",
    "maxLength": "max_length",
    "max_chars": "max_length",
    "subLabel": "sub_label",
    "min": "min_value",
    "max": "max_value",
}


def normalize_field_name(name: object) -> str:
    text = str(name)
    return _FIELD_ALIASES.get(text, text)


@dataclass(eq=False)
class SettingDefinition:
    kind: SettingKind | str | None = None
    name: str = ""
    tooltip: str | None = None
    on_change: Callable[[Any], None] | None = None
    path: str | None = None
    default_value: Any = None
    get_value: Callable[[], Any] | None = None
    set_value: Callable[[Any], None] | None = None
    min_value: float | int | None = None
    max_value: float | int | None = None
    step: float | int | None = None
    choices: list[Any] = field(default_factory=list)
    images: list[str] = field(default_factory=list)
    max_length: int | None = None
    on_activate: Callable[[], None] | None = None
    sub_label: str | None = None
    is_defaults_action: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
    setting_id: int = field(default_factory=_next_setting_id)

    def __post_init__(self) -> None:
        self.kind = SettingKind.parse(self.kind)
        self.choices = list(self.choices or [])
        self.images = list(self.images or [])

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "SettingDefinition":
        if not isinstance(mapping, Mapping):
            raise ConfigurationError(f"Setting definition must be a mapping, got {type(mapping).__name__}")
        known = _field_names()
        kwargs: dict[str, Any] = {}
        metadata: dict[str, Any] = dict(mapping.get("metadata") or {})
        for raw_key, value in mapping.items():
            key = normalize_field_name(raw_key)
            if key in ("metadata", "setting_id"):
                continue
            if key in known:
                kwargs[key] = value
            else:
                metadata[str(raw_key)] = value
        return cls(metadata=metadata, **kwargs)

    @property
    def uses_accessors(self) -> bool:
        return self.get_value is not None and self.set_value is not None

    @property
    def storage_mode(self) -> str:
        if self.uses_accessors:
            return "accessor"
        if self.path:
            return "path"
        return "none"

    @property
    def is_interactive(self) -> bool:
        return self.kind not in NON_INTERACTIVE_KINDS

    def numeric_bounds(self) -> tuple[float | int, float | int, float | int]:
        low = DEFAULT_NUMERIC_MIN if self.min_value is None else self.min_value
        high = DEFAULT_NUMERIC_MAX if self.max_value is None else self.max_value
        step = DEFAULT_NUMERIC_STEP if self.step is None else self.step
        return low, high, step

    def validate(self) -> None:
        if self.kind is None:
            raise ConfigurationError(f"Setting {self.name!r}: kind is required")
        if (self.get_value is None) != (self.set_value is None):
            raise ConfigurationError(
                f"Setting {self.name!r}: get_value and set_value must be supplied together"
            )
        for attr in ("get_value", "set_value", "on_change", "on_activate"):
            value = getattr(self, attr)
            if value is not None and not callable(value):
                raise ConfigurationError(f"Setting {self.name!r}: {attr} must be callable")
        if self.path is not None and (not isinstance(self.path, str) or not split_path(self.path)):
            raise ConfigurationError(f"Setting {self.name!r}: path must be a non-empty dot path")
        if self.kind == SettingKind.NUMERIC:
            low, high, step = self.numeric_bounds()
            if step <= 0:
                raise ConfigurationError(f"Setting {self.name!r}: step must be positive")
            if low > high:
                raise ConfigurationError(f"Setting {self.name!r}: min must not exceed max")

    def apply_changes(self, changes: Mapping[str, Any]) -> set[str]:
        """Shallow-merge ``changes`` in place and return the touched field names."""
        known = _field_names()
        touched: set[str] = set()
        for raw_key, value in changes.items():
            key = normalize_field_name(raw_key)
            if key == "setting_id":
                continue
            if key in known:
                if key == "kind":
                    value = SettingKind.parse(value)
                elif key in ("choices", "images"):
                    value = list(value or [])
                setattr(self, key, value)
                touched.add(key)
            else:
                self.metadata[str(raw_key)] = value
                touched.add("metadata")
        return touched

    def copy(self) -> "SettingDefinition":
        return replace(
            self,
            choices=list(self.choices),
            images=list(self.images),
            metadata=dict(self.metadata),
            setting_id=_next_setting_id(),
        )

    def __repr__(self) -> str:
        kind = self.kind.value if isinstance(self.kind, SettingKind) else self.kind
        return f"SettingDefinition(id={self.setting_id}, kind={kind!r}, name={self.name!r})"


STORAGE_FIELDS = frozenset({"path", "default_value", "get_value", "set_value"})


def _field_names() -> frozenset[str]:
    return frozenset(f.name for f in fields(SettingDefinition))
