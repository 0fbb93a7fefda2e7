"""Settings control panel for the TUI."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widget import Widget
from textual.widgets import (
    Button,
    Checkbox,
    Input,
    Label,
    Select,
    Static,
)

from ascii_photo.core.charsets import CHARSETS, CharsetName, Palette
from ascii_photo.core.errors import EmptyPaletteError
from ascii_photo.core.processor import DitherMode, OutputMode, Settings, clamp_delta

# Settings field -> (label, step) for the numeric rows
NUMERIC_FIELDS = {
    "brightness": ("Brightness", 10),
    "contrast": ("Contrast", 10),
    "scale": ("Scale", 1),
}


def _charset_for(palette: Palette) -> CharsetName | None:
    for name, preset in CHARSETS.items():
        if preset == palette:
            return name
    return None


class ControlPanel(Widget):
    """Settings panel with controls for conversion parameters."""

    DEFAULT_CSS = """
    ControlPanel {
        width: 32;
        height: 1fr;
        background: $panel;
        padding: 1;
        border-left: solid $accent;
        overflow-y: auto;
    }

    ControlPanel Label {
        margin-top: 1;
        color: $text-muted;
    }

    ControlPanel Select {
        width: 100%;
        margin-bottom: 0;
    }

    ControlPanel Checkbox {
        margin-top: 1;
    }

    ControlPanel #panel-title {
        text-style: bold;
        color: $text;
        margin-bottom: 1;
    }

    ControlPanel .num-row {
        height: 3;
        margin-top: 1;
    }

    ControlPanel .num-row Label {
        width: 12;
        margin-top: 0;
        padding-top: 1;
    }

    ControlPanel .num-row Button {
        min-width: 3;
        margin: 0;
    }

    ControlPanel .num-row Input {
        width: 1fr;
        margin: 0;
    }
    """

    class SettingsChanged(Message):
        """Posted when any setting changes."""

        def __init__(self, settings: Settings) -> None:
            super().__init__()
            self.settings = settings

    def __init__(self, settings: Settings | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self._settings = settings or Settings()

    def compose(self) -> ComposeResult:
        charset = _charset_for(self._settings.palette)
        with Vertical():
            yield Static("Settings", id="panel-title")

            yield Label("Charset")
            yield Select(
                [(c.value, c.value) for c in CharsetName],
                value=charset.value if charset else Select.BLANK,
                id="charset-select",
            )

            yield Label("Custom palette (light → dark)")
            yield Input(
                value="" if charset else "".join(reversed(self._settings.palette.glyphs)),
                placeholder=' .:-=+*#%@',
                id="palette-input",
            )

            yield Label("Dither")
            yield Select(
                [(m.value, m.value) for m in DitherMode],
                value=self._settings.dither.value,
                allow_blank=False,
                id="dither-select",
            )

            yield Label("Output")
            yield Select(
                [(m.value, m.value) for m in OutputMode],
                value=self._settings.output.value,
                allow_blank=False,
                id="output-select",
            )

            yield Checkbox("Color", value=self._settings.color, id="color-check")
            yield Checkbox("Invert", value=self._settings.invert, id="invert-check")
            yield Checkbox("Sharpen", value=self._settings.sharpen, id="sharpen-check")

            for field, (label, _step) in NUMERIC_FIELDS.items():
                with Horizontal(classes="num-row"):
                    yield Label(label)
                    yield Button("-", id=f"{field}-dec")
                    yield Input(
                        value=str(getattr(self._settings, field)),
                        id=f"{field}-input",
                        type="integer",
                    )
                    yield Button("+", id=f"{field}-inc")

    @property
    def settings(self) -> Settings:
        return self._settings

    def _update_settings(self, **overrides) -> None:
        """Create new settings with overrides and emit change."""
        self._settings = self._settings.replace(**overrides)
        self.post_message(self.SettingsChanged(self._settings))

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.value == Select.BLANK:
            return
        if event.select.id == "charset-select":
            self._update_settings(palette=CHARSETS[CharsetName(event.value)])
        elif event.select.id == "dither-select":
            self._update_settings(dither=DitherMode(event.value))
        elif event.select.id == "output-select":
            self._update_settings(output=OutputMode(event.value))

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        if event.checkbox.id == "color-check":
            self._update_settings(color=event.value)
        elif event.checkbox.id == "invert-check":
            self._update_settings(invert=event.value)
        elif event.checkbox.id == "sharpen-check":
            self._update_settings(sharpen=event.value)

    def _clamp(self, field: str, value: int) -> int:
        if field == "scale":
            return max(1, value)
        return clamp_delta(value)

    def _set_numeric(self, field: str, value: int) -> None:
        value = self._clamp(field, value)
        self.query_one(f"#{field}-input", Input).value = str(value)
        self._update_settings(**{field: value})

    def on_button_pressed(self, event: Button.Pressed) -> None:
        btn = event.button.id or ""
        field, _, direction = btn.rpartition("-")
        if field not in NUMERIC_FIELDS:
            return
        step = NUMERIC_FIELDS[field][1]
        delta = step if direction == "inc" else -step
        self._set_numeric(field, getattr(self._settings, field) + delta)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        input_id = event.input.id or ""
        if input_id == "palette-input":
            try:
                palette = Palette.from_user_string(event.value)
            except EmptyPaletteError:
                palette = CHARSETS[CharsetName.DEFAULT]
            self._update_settings(palette=palette)
            return

        field = input_id.removesuffix("-input")
        if field not in NUMERIC_FIELDS:
            return
        try:
            val = int(event.value)
        except ValueError:
            return
        self._set_numeric(field, val)

    def update_scale(self, scale: int) -> None:
        """Set the scale factor without emitting a change."""
        self._settings = self._settings.replace(scale=max(1, scale))
        self.query_one("#scale-input", Input).value = str(self._settings.scale)
