"""Capture-flow contract and the text-only color fallback.

A capture flow is a request handed to a collaborator together with a
completion callback. The collaborator calls ``on_accept`` at most once, or
``on_cancel`` (text only) when the user backs out. Nothing is committed
on cancel.
"""

from __future__ import annotations

import enum
import math
from collections.abc import Callable
from typing import Protocol

from ..app_settings.coercion import coerce_number
from ..logging_utils import get_logger
from .definition import Color

LOGGER = get_logger(__name__)

COLOR_CHANNEL_MAX_CHARS = 3


class TextInputProvider(Protocol):
    def request_text_input(
        self,
        title: str,
        current_text: str,
        max_length: int,
        on_accept: Callable[[str], None],
        on_cancel: Callable[[], None] | None = None,
    ) -> None: ...


class CaptureProvider(TextInputProvider, Protocol):
    def request_color_input(self, title: str, current_color: Color, on_accept: Callable[[Color], None]) -> None: ...


class ColorStep(enum.Enum):
    ASK_RED = "red"
    ASK_GREEN = "green"
    ASK_BLUE = "blue"
    DONE = "done"
    CANCELLED = "cancelled"


_NEXT_STEP = {
    ColorStep.ASK_RED: ColorStep.ASK_GREEN,
    ColorStep.ASK_GREEN: ColorStep.ASK_BLUE,
    ColorStep.ASK_BLUE: ColorStep.DONE,
}
_CHANNEL_INDEX = {ColorStep.ASK_RED: 0, ColorStep.ASK_GREEN: 1, ColorStep.ASK_BLUE: 2}
_CHANNEL_LABEL = {ColorStep.ASK_RED: "Red", ColorStep.ASK_GREEN: "Green", ColorStep.ASK_BLUE: "Blue"}


def parse_channel(text: object) -> float:
    num = coerce_number(str(text or "").strip(), 0)
    return max(0, min(255, int(num))) / 255


class ColorCaptureFlow:
    """Ask for red, green and blue as three chained 0-255 text prompts.

    Each accepted prompt advances the state and carries the partially built
    color forward. Alpha is kept from the starting color.
    """

    def __init__(
        self,
        text_input: TextInputProvider,
        title: str,
        current: Color,
        on_accept: Callable[[Color], None],
    ) -> None:
        self._text_input = text_input
        self._title = title or "Color"
        self._channels = [current.r, current.g, current.b]
        self._alpha = current.a
        self._on_accept = on_accept
        self.state = ColorStep.ASK_RED

    @property
    def partial(self) -> Color:
        return Color(self._channels[0], self._channels[1], self._channels[2], self._alpha)

    @property
    def finished(self) -> bool:
        return self.state in (ColorStep.DONE, ColorStep.CANCELLED)

    def start(self) -> None:
        self._ask()

    def _ask(self) -> None:
        index = _CHANNEL_INDEX[self.state]
        self._text_input.request_text_input(
            f"{self._title} - {_CHANNEL_LABEL[self.state]} (0-255)",
            str(math.floor(self._channels[index] * 255)),
            COLOR_CHANNEL_MAX_CHARS,
            self._accept_channel,
            self.cancel,
        )

    def _accept_channel(self, text: str) -> None:
        if self.finished:
            return
        self._channels[_CHANNEL_INDEX[self.state]] = parse_channel(text)
        self.state = _NEXT_STEP[self.state]
        if self.state is ColorStep.DONE:
            self._on_accept(self.partial)
            return
        self._ask()

    def cancel(self) -> None:
        if self.finished:
            return
        LOGGER.debug("Color capture %r cancelled at %s", self._title, self.state.value)
        self.state = ColorStep.CANCELLED


class TextColorCapture:
    """Capture provider for hosts that only offer text entry."""

    def __init__(self, text_input: TextInputProvider) -> None:
        self._text_input = text_input
        self.active_flow: ColorCaptureFlow | None = None

    def request_text_input(
        self,
        title: str,
        current_text: str,
        max_length: int,
        on_accept: Callable[[str], None],
        on_cancel: Callable[[], None] | None = None,
    ) -> None:
        self._text_input.request_text_input(title, current_text, max_length, on_accept, on_cancel)

    def request_color_input(self, title: str, current_color: Color, on_accept: Callable[[Color], None]) -> None:
        self.active_flow = ColorCaptureFlow(self._text_input, title, current_color, on_accept)
        self.active_flow.start()
