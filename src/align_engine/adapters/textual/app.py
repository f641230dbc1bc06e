"""Executable Textual app that hosts the alignment engine."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

try:  # pragma: no cover - imported only when demo is run
    from rich.text import Text
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import Vertical
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use align_engine.adapters.textual.app"
    ) from exc

from align_engine.buffer import Buffer, BufferMirror
from align_engine.modes import ModeContext
from align_engine.modes.mode_manager import ModeManager
from align_engine.runtime import AlignSettings, telemetry

from .controller import TextualAlignAdapter, TextualUIHooks


def create_default_manager(
    text: str = "", *, settings: AlignSettings | None = None
) -> ModeManager:
    """Build a ModeManager with normal and insert mode plus default keymaps."""

    context = ModeContext(
        buffer=Buffer.from_text(text),
        settings=settings or AlignSettings.from_env(),
    )
    return ModeManager(context)


def render_mirror(mirror: BufferMirror) -> Text:
    """Render buffer text with uncommitted padding and the cursor highlighted."""

    rendered = Text()
    spans_by_row: dict[int, list[tuple[int, int]]] = {}
    for row, start, end in mirror.previews:
        spans_by_row.setdefault(row, []).append((start, end))
    cursor_row, cursor_col = mirror.cursor
    for row, line in enumerate(mirror.text.split("\n")):
        if row:
            rendered.append("\n")
        offset = len(rendered)
        rendered.append(line if row != cursor_row or cursor_col < len(line) else line + " ")
        for start, end in spans_by_row.get(row, ()):
            rendered.stylize("on dark_green", offset + start, offset + end)
        if row == cursor_row:
            rendered.stylize("reverse", offset + cursor_col, offset + cursor_col + 1)
    return rendered


@dataclass
class UIState:
    buffer_text: str = ""
    status_text: str = ""


class AlignEngineApp(App[None]):
    """Minimal Textual UI embedding the alignment engine."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#buffer-view {
		height: 1fr;
		border: round $accent;
		padding: 1 1;
		content-align: left top;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self, *, text: str = "", settings: AlignSettings | None = None
    ) -> None:
        super().__init__()
        self._state = UIState()
        self._initial_text = text
        self._settings = settings
        self.manager: ModeManager | None = None
        self.adapter: TextualAlignAdapter | None = None
        self._buffer_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="buffer-area"):
            self._buffer_widget = Static("", id="buffer-view")
            yield self._buffer_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    async def on_mount(self) -> None:
        self.manager = create_default_manager(
            self._initial_text, settings=self._settings
        )
        hooks = TextualUIHooks(
            update_buffer=self._update_buffer,
            update_status=self._update_status,
        )
        self.adapter = TextualAlignAdapter(self.manager, hooks)

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        normalized = self._normalize_key(event)
        if normalized is None:
            return
        key, text, modifiers = normalized
        self.adapter.handle_textual_key(key, text=text, modifiers=modifiers)
        event.stop()

    def _update_buffer(self, mirror: BufferMirror) -> None:
        self._state.buffer_text = mirror.text
        if self._buffer_widget:
            self._buffer_widget.update(render_mirror(mirror))

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    @staticmethod
    def _normalize_key(
        event: events.Key,
    ) -> Optional[Tuple[str, Optional[str], Tuple[str, ...]]]:
        modifiers = []
        if getattr(event, "ctrl", False):
            modifiers.append("CTRL")
        if getattr(event, "alt", False) or getattr(event, "meta", False):
            modifiers.append("ALT")
        key = event.key
        if key in {"ctrl+c", "ctrl+q"}:
            return None
        if key == "escape":
            return ("ESC", None, tuple(modifiers))
        if key in {"enter", "return"}:
            return ("ENTER", None, tuple(modifiers))
        if key == "space":
            return ("SPACE", " ", tuple(modifiers))
        if key in {"left", "right", "up", "down", "backspace"}:
            return (key.upper(), None, tuple(modifiers))
        if event.character and event.character.isprintable():
            return (event.character, event.character, tuple(modifiers))
        return (key.upper(), None, tuple(modifiers))


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run the column alignment Textual demo."
    )
    parser.add_argument(
        "file",
        nargs="?",
        type=Path,
        help="Text file to load into the buffer",
    )
    parser.add_argument(
        "--tab-width",
        type=int,
        default=None,
        help="Display width of a tab (default: ALIGN_ENGINE_TAB_WIDTH or 8)",
    )
    parser.add_argument(
        "--scan-limit",
        type=int,
        default=None,
        help="Maximum lines each scan direction may join",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(preset="quiet")
    settings = AlignSettings.from_env()
    if args.tab_width is not None or args.scan_limit is not None:
        settings = AlignSettings(
            tab_width=args.tab_width or settings.tab_width,
            repeat_actions=settings.repeat_actions,
            scan_limit=args.scan_limit or settings.scan_limit,
        )
    text = args.file.read_text(encoding="utf-8") if args.file else ""
    AlignEngineApp(text=text, settings=settings).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
