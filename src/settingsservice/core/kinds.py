"""Per-kind behaviour: how each control kind reads, displays and writes.

Every strategy offers the same capability set (``build_rows``, ``sync``,
``activate``, ``step``, ``set_value``) so the sync engine can dispatch on
``definition.kind`` without knowing any kind in particular.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from ..app_settings.coercion import coerce_bool, coerce_number
from ..logging_utils import get_logger
from .definition import WHITE, Color, SettingDefinition, SettingKind
from .resolver import is_absent
from .rows import ROLE_ACTION, ROLE_LABEL, ROLE_SEPARATOR, ROLE_VALUE, RowHandle
from .stepping import cycle_choice, format_number, snap

if TYPE_CHECKING:
    from .capture import CaptureProvider

LOGGER = get_logger(__name__)


class KindContext(Protocol):
    """The slice of the sync engine a kind strategy may use."""

    capture: "CaptureProvider | None"
    text_max_length: int

    def read(self, definition: SettingDefinition) -> Any: ...

    def write(self, definition: SettingDefinition, value: Any) -> None: ...

    def on_written_by_user(self, row: RowHandle) -> None: ...

    def rows_for(self, ref: object) -> list[RowHandle]: ...


def notify_change(definition: SettingDefinition, value: Any) -> None:
    if definition.on_change is None:
        return
    try:
        definition.on_change(value)
    except Exception:
        LOGGER.exception("on_change callback failed for setting %r", definition.name)
        raise


class KindBehaviour:
    kind: SettingKind
    role = ROLE_VALUE
    interactive = True

    def current(self, ctx: KindContext, definition: SettingDefinition) -> Any:
        return ctx.read(definition)

    def snapshot(self, value: Any) -> Any:
        return value

    def value_text(self, value: Any) -> str:
        return "" if value is None else str(value)

    def show(self, row: RowHandle, value: Any) -> None:
        row.value = value
        row.value_text = self.value_text(value)
        row.last_displayed = self.snapshot(value)

    def build_rows(self, ctx: KindContext, definition: SettingDefinition) -> list[RowHandle]:
        row = RowHandle(
            setting_id=definition.setting_id,
            kind=self.kind,
            role=self.role,
            text=definition.name or "",
            sub_label=definition.sub_label,
            tooltip=definition.tooltip,
            interactive=self.interactive,
        )
        self.show(row, self.current(ctx, definition))
        return [row]

    def sync(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle) -> bool:
        value = self.current(ctx, definition)
        if self.snapshot(value) == row.last_displayed:
            return False
        self.show(row, value)
        return True

    def live_rows(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle) -> list[RowHandle]:
        # Capture callbacks may land after a full rebuild replaced ``row``.
        return ctx.rows_for(definition) or [row]

    def commit(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle, value: Any) -> None:
        ctx.write(definition, value)
        for live in self.live_rows(ctx, definition, row):
            self.show(live, value)
        ctx.on_written_by_user(row)
        notify_change(definition, value)

    def activate(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle) -> None:
        return None

    def step(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle, delta: int) -> None:
        return None

    def set_value(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle, value: Any) -> None:
        self.commit(ctx, definition, row, value)


class ToggleBehaviour(KindBehaviour):
    kind = SettingKind.TOGGLE

    def current(self, ctx: KindContext, definition: SettingDefinition) -> bool:
        return coerce_bool(ctx.read(definition), False)

    def value_text(self, value: Any) -> str:
        return "On" if value else "Off"

    def activate(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle) -> None:
        self.commit(ctx, definition, row, not self.current(ctx, definition))

    def step(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle, delta: int) -> None:
        self.activate(ctx, definition, row)

    def set_value(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle, value: Any) -> None:
        self.commit(ctx, definition, row, coerce_bool(value, False))


class NumericBehaviour(KindBehaviour):
    kind = SettingKind.NUMERIC

    def current(self, ctx: KindContext, definition: SettingDefinition) -> float | int:
        low, high, step = definition.numeric_bounds()
        raw = ctx.read(definition)
        number = low if is_absent(raw) else coerce_number(raw, low)
        return snap(number, low, high, step)

    def value_text(self, value: Any) -> str:
        return format_number(value)

    def _move(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle, delta: int) -> None:
        low, high, step = definition.numeric_bounds()
        target = snap(self.current(ctx, definition) + delta * step, low, high, step)
        self.commit(ctx, definition, row, target)

    def activate(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle) -> None:
        self._move(ctx, definition, row, 1)

    def step(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle, delta: int) -> None:
        self._move(ctx, definition, row, 1 if delta >= 0 else -1)

    def set_value(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle, value: Any) -> None:
        low, high, step = definition.numeric_bounds()
        number = coerce_number(value, self.current(ctx, definition))
        self.commit(ctx, definition, row, snap(number, low, high, step))


class ChoiceBehaviour(KindBehaviour):
    kind = SettingKind.CHOICE
    empty_value: Any = None

    def options(self, definition: SettingDefinition) -> list[Any]:
        return definition.choices

    def current(self, ctx: KindContext, definition: SettingDefinition) -> Any:
        raw = ctx.read(definition)
        if not is_absent(raw):
            return raw
        options = self.options(definition)
        return options[0] if options else self.empty_value

    def _move(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle, delta: int) -> None:
        options = self.options(definition)
        if not options:
            return
        target = cycle_choice(options, self.current(ctx, definition), 1 if delta >= 0 else -1)
        self.commit(ctx, definition, row, target)

    def activate(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle) -> None:
        self._move(ctx, definition, row, 1)

    def step(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle, delta: int) -> None:
        self._move(ctx, definition, row, delta)

    def set_value(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle, value: Any) -> None:
        if value not in self.options(definition):
            LOGGER.warning("Setting %r: %r is not one of its choices; ignored", definition.name, value)
            return
        self.commit(ctx, definition, row, value)


class ImageChoiceBehaviour(ChoiceBehaviour):
    kind = SettingKind.IMAGE_CHOICE
    empty_value = ""

    def options(self, definition: SettingDefinition) -> list[Any]:
        return definition.images


class ColorBehaviour(KindBehaviour):
    kind = SettingKind.COLOR

    def current(self, ctx: KindContext, definition: SettingDefinition) -> Color:
        raw = ctx.read(definition)
        if not is_absent(raw):
            return Color.from_value(raw)
        color = Color.from_value(definition.default_value) if definition.default_value is not None else WHITE
        if not definition.uses_accessors and definition.path:
            ctx.write(definition, color.to_mapping())
        return color

    def snapshot(self, value: Any) -> str:
        return Color.from_value(value).key()

    def value_text(self, value: Any) -> str:
        return Color.from_value(value).to_hex()

    def show(self, row: RowHandle, value: Any) -> None:
        super().show(row, Color.from_value(value))

    def commit(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle, value: Any) -> None:
        color = Color.from_value(value)
        ctx.write(definition, color.to_mapping())
        for live in self.live_rows(ctx, definition, row):
            self.show(live, color)
        ctx.on_written_by_user(row)
        notify_change(definition, color.to_mapping())

    def activate(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle) -> None:
        if ctx.capture is None:
            LOGGER.warning("Setting %r: no capture provider for color entry", definition.name)
            return
        ctx.capture.request_color_input(
            definition.name,
            self.current(ctx, definition),
            lambda color: self.commit(ctx, definition, row, color),
        )


class TextBehaviour(KindBehaviour):
    kind = SettingKind.TEXT

    def current(self, ctx: KindContext, definition: SettingDefinition) -> str:
        raw = ctx.read(definition)
        if is_absent(raw):
            raw = "" if definition.default_value is None else definition.default_value
        return str(raw)

    def max_length(self, ctx: KindContext, definition: SettingDefinition) -> int:
        return definition.max_length or ctx.text_max_length

    def set_value(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle, value: Any) -> None:
        text = "" if value is None else str(value)
        self.commit(ctx, definition, row, text[: self.max_length(ctx, definition)])

    def activate(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle) -> None:
        if ctx.capture is None:
            LOGGER.warning("Setting %r: no capture provider for text entry", definition.name)
            return

        def on_cancel() -> None:
            LOGGER.debug("Text capture for %r cancelled", definition.name)

        ctx.capture.request_text_input(
            definition.name,
            self.current(ctx, definition),
            self.max_length(ctx, definition),
            lambda text: self.set_value(ctx, definition, row, text),
            on_cancel,
        )


class ActionBehaviour(KindBehaviour):
    kind = SettingKind.ACTION
    role = ROLE_ACTION

    def current(self, ctx: KindContext, definition: SettingDefinition) -> Any:
        return None

    def sync(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle) -> bool:
        return False

    def activate(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle) -> None:
        if definition.on_activate is None:
            return
        try:
            definition.on_activate()
        except Exception:
            LOGGER.exception("on_activate callback failed for setting %r", definition.name)
            raise

    def set_value(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle, value: Any) -> None:
        return None


class LabelBehaviour(ActionBehaviour):
    kind = SettingKind.LABEL
    role = ROLE_LABEL
    interactive = False

    def activate(self, ctx: KindContext, definition: SettingDefinition, row: RowHandle) -> None:
        return None


class SeparatorBehaviour(LabelBehaviour):
    kind = SettingKind.SEPARATOR
    role = ROLE_SEPARATOR

    def build_rows(self, ctx: KindContext, definition: SettingDefinition) -> list[RowHandle]:
        rows = super().build_rows(ctx, definition)
        rows[0].text = ""
        return rows


KIND_BEHAVIOURS: dict[SettingKind, KindBehaviour] = {
    behaviour.kind: behaviour
    for behaviour in (
        ToggleBehaviour(),
        NumericBehaviour(),
        ChoiceBehaviour(),
        ImageChoiceBehaviour(),
        ColorBehaviour(),
        TextBehaviour(),
        ActionBehaviour(),
        LabelBehaviour(),
        SeparatorBehaviour(),
    )
}


def behaviour_for(kind: object) -> KindBehaviour | None:
    if not isinstance(kind, SettingKind):
        return None
    return KIND_BEHAVIOURS.get(kind)
