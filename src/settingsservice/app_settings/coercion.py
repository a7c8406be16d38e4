from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any


def coerce_bool(value, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off", ""}:
            return False
    return default


def coerce_int_clamped(value: object, default: int, min_value: int, max_value: int) -> int:
    try:
        num = int(value)  # type: ignore[arg-type]
    except Exception:
        num = default
    return max(min_value, min(max_value, num))


def coerce_number(value: object, default: float | int) -> float | int:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else default
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            num = float(text)
        except ValueError:
            return default
        return num if math.isfinite(num) else default
    return default


def coerce_text(value: object, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def _unit(value: object, default: float) -> float:
    num = coerce_number(value, default)
    return max(0.0, min(1.0, float(num)))


def coerce_color(value: object, default: tuple[float, float, float, float] | None = None) -> tuple[float, float, float, float]:
    """Normalize a color given as a mapping or sequence to an RGBA tuple of 0..1 floats."""
    fallback = default if default is not None else (1.0, 1.0, 1.0, 1.0)
    if isinstance(value, Mapping):
        return (
            _unit(value.get("r"), fallback[0]),
            _unit(value.get("g"), fallback[1]),
            _unit(value.get("b"), fallback[2]),
            _unit(value.get("a", 1.0), 1.0),
        )
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)) and len(value) in (3, 4):
        alpha = value[3] if len(value) == 4 else 1.0
        return (_unit(value[0], fallback[0]), _unit(value[1], fallback[1]), _unit(value[2], fallback[2]), _unit(alpha, 1.0))
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if len(text) in (6, 8) and all(ch in "0123456789abcdefABCDEF" for ch in text):
            channels = [int(text[i : i + 2], 16) / 255 for i in range(0, len(text), 2)]
            if len(channels) == 3:
                channels.append(1.0)
            return (channels[0], channels[1], channels[2], channels[3])
    return fallback
