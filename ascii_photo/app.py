"""Main Textual application for ascii_photo TUI."""

from __future__ import annotations

import platform
import subprocess
from pathlib import Path

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import (
    Button,
    Footer,
    Header,
    Input,
    Label,
    Static,
)
from textual.worker import get_current_worker

from ascii_photo.core.processor import GlyphFrame, Settings, preview_frame
from ascii_photo.core.reader import LoadedImage, open_image
from ascii_photo.tui.controls import ControlPanel
from ascii_photo.tui.preview import AsciiPreview
from ascii_photo.utils.cache import ResultCache
from ascii_photo.utils.terminal import fit_scale


class SaveScreen(ModalScreen[str | None]):
    """Modal screen for saving output."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", priority=True)]

    def action_cancel(self) -> None:
        self.dismiss(None)

    DEFAULT_CSS = """
    SaveScreen {
        align: center middle;
    }

    SaveScreen #save-dialog {
        width: 60;
        height: 12;
        background: $surface;
        border: thick $accent;
        padding: 1 2;
    }

    SaveScreen #save-title {
        text-style: bold;
        margin-bottom: 1;
    }

    SaveScreen Input {
        margin: 1 0;
    }

    SaveScreen .button-row {
        margin-top: 1;
        align: center middle;
        height: 3;
    }

    SaveScreen Button {
        margin: 0 1;
    }
    """

    def __init__(self, default_path: str = "", **kwargs) -> None:
        super().__init__(**kwargs)
        self._default_path = default_path

    def compose(self) -> ComposeResult:
        with Vertical(id="save-dialog"):
            yield Static("Save Output", id="save-title")
            yield Label("Output file path:")
            yield Input(
                value=self._default_path,
                placeholder="ascii_image.txt",
                id="save-path",
            )
            with Horizontal(classes="button-row"):
                yield Button("Save", variant="primary", id="btn-save")
                yield Button("Cancel", variant="default", id="btn-cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-save":
            path_input = self.query_one("#save-path", Input)
            self.dismiss(path_input.value or None)
        elif event.button.id == "btn-cancel":
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value or None)


class OpenFileScreen(ModalScreen[str | None]):
    """Simple modal for entering a file path."""

    BINDINGS = [Binding("escape", "cancel", "Cancel", priority=True)]

    def action_cancel(self) -> None:
        self.dismiss(None)

    DEFAULT_CSS = """
    OpenFileScreen {
        align: center middle;
    }

    OpenFileScreen #open-dialog {
        width: 60;
        height: 10;
        background: $surface;
        border: thick $accent;
        padding: 1 2;
    }

    OpenFileScreen #open-title {
        text-style: bold;
        margin-bottom: 1;
    }

    OpenFileScreen .button-row {
        margin-top: 1;
        align: center middle;
        height: 3;
    }

    OpenFileScreen Button {
        margin: 0 1;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical(id="open-dialog"):
            yield Static("Open Image", id="open-title")
            yield Input(placeholder="Path or URL to an image...", id="file-input")
            with Horizontal(classes="button-row"):
                yield Button("Open", variant="primary", id="btn-open")
                yield Button("Cancel", variant="default", id="btn-cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-open":
            inp = self.query_one("#file-input", Input)
            self.dismiss(inp.value or None)
        elif event.button.id == "btn-cancel":
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value or None)


class AsciiPhotoApp(App):
    """Main TUI application."""

    TITLE = "ascii_photo"
    CSS = """
    #main-area {
        height: 1fr;
        width: 1fr;
    }

    #preview-container {
        width: 1fr;
        height: 1fr;
    }

    #status-bar {
        height: 1;
        background: $panel;
        padding: 0 1;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", priority=True),
        Binding("s", "save", "Save", priority=True),
        Binding("c", "copy", "Copy", priority=True),
        Binding("o", "open_file", "Open", priority=True),
        Binding("tab", "toggle_panel", "Toggle Panel"),
    ]

    def __init__(
        self,
        input_path: str | None = None,
        settings: Settings | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._input_path = input_path
        self._image: LoadedImage | None = None
        self._cache = ResultCache(max_size=32)
        self._settings = settings or Settings()
        # Keep a scale given on the command line instead of fitting the preview
        self._fixed_scale = settings is not None
        self._panel_visible = True

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-area"):
            with Vertical(id="preview-container"):
                yield AsciiPreview()
            yield ControlPanel(self._settings, id="control-panel")
        yield Static("Ready", id="status-bar")
        yield Footer()

    def on_mount(self) -> None:
        if self._input_path:
            self._load_file(self._input_path)
        else:
            self.action_open_file()

    def _load_file(self, path: str) -> None:
        """Load an image file."""
        try:
            self._image = open_image(path)
        except (ValueError, OSError) as e:
            self._update_status(f"Error: {e}")
            return

        info = self._image.info
        self.title = f"ascii_photo - {info.path.name}"

        panel = self.query_one(ControlPanel)
        if not self._fixed_scale:
            preview = self.query_one(AsciiPreview)
            pw = preview.size.width or 80
            ph = preview.size.height or 24
            panel.update_scale(
                fit_scale(info.width, info.height, max_width=pw - 2, max_height=ph - 2)
            )
        self._fixed_scale = False
        self._settings = panel.settings

        self._cache.clear()
        self._update_status(f"Loaded {info.path.name} ({info.width}x{info.height})")
        self._render_preview()

    def _update_status(self, text: str) -> None:
        status = self.query_one("#status-bar", Static)
        status.update(text)

    @work(thread=True, exclusive=True, group="preview")
    def _render_preview(self) -> None:
        """Convert the image for the preview in a background thread."""
        if self._image is None:
            return

        worker = get_current_worker()
        settings = self._settings
        cache_key = settings.hash()

        cached = self._cache.get(cache_key)
        if cached is not None:
            if not worker.is_cancelled:
                self.call_from_thread(self._display_frame, cached, settings)
            return

        try:
            frame = preview_frame(self._image.grid, settings)
        except ValueError as e:
            if not worker.is_cancelled:
                self.call_from_thread(self._update_status, f"Error: {e}")
            return

        self._cache.put(cache_key, frame)
        if not worker.is_cancelled:
            self.call_from_thread(self._display_frame, frame, settings)

    def _display_frame(self, frame: GlyphFrame, settings: Settings) -> None:
        """Display a converted frame (called on main thread)."""
        preview = self.query_one(AsciiPreview)
        preview.update_frame(frame, color=settings.color)
        self._update_status(
            f"{frame.width}x{frame.height} glyphs, scale {settings.scale}, "
            f"{settings.dither.value}"
        )

    # --- Actions ---

    def action_save(self) -> None:
        from ascii_photo.core.writer import default_output_path

        if self._image is None:
            self._update_status("No file loaded")
            return
        default_path = default_output_path(self._image.info.path, self._settings.output)
        self.push_screen(SaveScreen(str(default_path)), self._on_save_result)

    def _on_save_result(self, path: str | None) -> None:
        if path is None:
            return
        self._do_save(path)

    @work(thread=True, exclusive=True, group="save")
    def _do_save(self, output_path: str) -> None:
        """Convert and save in a background thread."""
        from ascii_photo.core.processor import process_image
        from ascii_photo.core.writer import save_result

        if self._image is None:
            return

        worker = get_current_worker()
        out = Path(output_path)
        self.call_from_thread(self._update_status, "Saving...")

        try:
            result = process_image(self._image.grid, self._settings)
            save_result(result, out)
        except (ValueError, OSError) as e:
            if not worker.is_cancelled:
                self.call_from_thread(self._update_status, f"Save error: {e}")
            return

        if not worker.is_cancelled:
            self.call_from_thread(self._update_status, f"Saved to {out}")

    def action_copy(self) -> None:
        """Copy the current ASCII art to the system clipboard."""
        preview = self.query_one(AsciiPreview)
        frame = preview.current_frame
        if frame is None:
            self._update_status("Nothing to copy")
            return

        text = "\n".join(frame.lines)
        system = platform.system()
        if system == "Darwin":
            command = ["pbcopy"]
        elif system == "Linux":
            command = ["xclip", "-selection", "clipboard"]
        elif system == "Windows":
            command = ["clip"]
        else:
            self._update_status("Clipboard not supported on this platform")
            return

        try:
            proc = subprocess.Popen(command, stdin=subprocess.PIPE)
            proc.communicate(text.encode("utf-8"))
        except FileNotFoundError:
            self._update_status("Clipboard tool not found (pbcopy/xclip/clip)")
            return

        if proc.returncode == 0:
            self._update_status("Copied to clipboard")
        else:
            self._update_status("Failed to copy to clipboard")

    def action_open_file(self) -> None:
        self.push_screen(OpenFileScreen(), self._on_file_selected)

    def _on_file_selected(self, path: str | None) -> None:
        if path:
            self._load_file(path)

    def action_toggle_panel(self) -> None:
        panel = self.query_one("#control-panel", ControlPanel)
        self._panel_visible = not self._panel_visible
        panel.display = self._panel_visible

    # --- Message handlers ---

    def on_control_panel_settings_changed(
        self, event: ControlPanel.SettingsChanged
    ) -> None:
        self._settings = event.settings
        if self._image is not None:
            self._render_preview()


def run_app(input_path: str | None = None, settings: Settings | None = None) -> None:
    """Launch the TUI application."""
    app = AsciiPhotoApp(input_path=input_path, settings=settings)
    app.run()
