"""Executable Textual app for editing one tile file."""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use tile_editor.adapters.textual.app"
    ) from exc

from tile_editor.runtime import telemetry
from tile_editor.session import AppConfig, EditSession, GridProfile, TileMirror
from tile_editor.storage import read_tile, write_tile

from .controller import TextualTileAdapter, TextualUIHooks

ALLOWED_STYLE = "green"
REJECTED_STYLE = "bold red"
CURSOR_STYLE = "reverse"


def render_tile(mirror: TileMirror) -> Text:
    """Colour allowed characters green, disallowed ones and over-budget rows red."""

    text = Text()
    offset = 0
    for item in mirror.classification:
        at_cursor = offset == mirror.cursor
        if item.char == "\n":
            if at_cursor:
                text.append(" ", style=CURSOR_STYLE)
            text.append("\n")
        else:
            valid = item.allowed and not item.row_overflow
            style = ALLOWED_STYLE if valid else REJECTED_STYLE
            if at_cursor:
                style = f"{style} {CURSOR_STYLE}"
            text.append(item.char, style=style)
        offset += 1
    if mirror.cursor >= len(mirror.text):
        text.append(" ", style=CURSOR_STYLE)
    return text


class TileEditorApp(App[None]):
    """Single-tile editor: type, Enter to break a row, Ctrl+S to save."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#tile-view {
		height: 1fr;
		border: round $accent;
		padding: 1 2;
		content-align: left top;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, path: Path, *, profile: GridProfile, config: AppConfig) -> None:
        super().__init__()
        self.path = path
        self.profile = profile
        self.app_config = config
        self.adapter: TextualTileAdapter | None = None
        self._tile_widget: Static | None = None
        self._status_widget: Static | None = None
        self.logger = telemetry.get_logger("tile_editor.adapters.textual")

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="tile-area"):
            self._tile_widget = Static("", id="tile-view")
            yield self._tile_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        session = EditSession.open(
            read_tile(self.path),
            self.app_config.session_config(self.profile),
            name=self.path.name,
        )
        self.title = f"{self.path.name} ({self.profile.value})"
        hooks = TextualUIHooks(
            update_buffer=self._update_tile,
            update_status=self._update_status,
            save=self._save,
            log=self.logger.debug,
        )
        self.adapter = TextualTileAdapter(session, hooks)

    def on_key(self, event: events.Key) -> None:
        if not self.adapter or event.key == "ctrl+q":
            return
        result = self.adapter.handle_textual_key(event.key, text=event.character)
        if result is not None:
            event.stop()

    def _update_tile(self, mirror: TileMirror) -> None:
        if self._tile_widget:
            self._tile_widget.update(render_tile(mirror))

    def _update_status(self, status: str) -> None:
        if self._status_widget:
            self._status_widget.update(status)

    def _save(self, storage: str) -> None:
        write_tile(self.path, storage)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Edit a fixed-grid text tile.")
    parser.add_argument("path", type=Path, help="Tile file to edit (created on save)")
    parser.add_argument(
        "--extended",
        action="store_true",
        help="Use the extended grid profile instead of the basic one",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings file (default: $TILE_EDITOR_CONFIG or ~/.config/tile_editor)",
    )
    parser.add_argument(
        "--log-preset",
        default=os.environ.get("TILE_EDITOR_LOG_PRESET"),
        choices=telemetry.PRESETS,
        help="Telemetry preset to activate before start-up",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    config = AppConfig.load(args.config)
    profile = GridProfile.EXTENDED if args.extended else GridProfile.BASIC
    TileEditorApp(args.path, profile=profile, config=config).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
