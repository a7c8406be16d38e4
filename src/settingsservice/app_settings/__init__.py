"""Store access, coercion and panel configuration helpers."""

from .coercion import coerce_bool, coerce_color, coerce_int_clamped, coerce_number, coerce_text
from .config import DEFAULT_RESET_LABEL, DEFAULT_TEXT_MAX_LENGTH, PanelConfig
from .path_store import MISSING, apply_defaults, get_path, set_path, split_path

__all__ = [
    "MISSING",
    "DEFAULT_RESET_LABEL",
    "DEFAULT_TEXT_MAX_LENGTH",
    "PanelConfig",
    "apply_defaults",
    "coerce_bool",
    "coerce_color",
    "coerce_int_clamped",
    "coerce_number",
    "coerce_text",
    "get_path",
    "set_path",
    "split_path",
]
