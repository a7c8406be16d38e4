from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any


def _decimals(value: float | int) -> int:
    if isinstance(value, int):
        return 0
    text = repr(float(value)).lower()
    mantissa, _, exponent = text.partition("e")
    digits = len(mantissa.partition(".")[2].rstrip("0"))
    if exponent:
        digits -= int(exponent)
    return max(0, digits)


def snap(value: float | int, min_value: float | int, max_value: float | int, step: float | int) -> float | int:
    """Snap ``value`` onto the ``min + k * step`` grid, clamped to ``[min, max]``.

    Results are rounded to the decimals of ``step`` and ``min`` so that
    ``0.1 * 3`` lands on ``0.3`` and not on its float neighbour.
    """
    snapped = math.floor((value - min_value) / step + 0.5) * step + min_value
    if snapped > max_value:
        # max may sit between two steps; clamp to the last step below it
        snapped = math.floor((max_value - min_value) / step + 1e-9) * step + min_value
    ndigits = max(_decimals(step), _decimals(min_value))
    if ndigits:
        snapped = round(snapped, ndigits)
    return max(min_value, min(max_value, snapped))


def cycle_choice(choices: Sequence[Any], current: Any, delta: int) -> Any:
    if not choices:
        return current
    try:
        index = list(choices).index(current)
    except ValueError:
        index = 0
    return choices[(index + delta) % len(choices)]


def format_number(value: float | int) -> str:
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return f"{value:.10g}"
    return str(value)
