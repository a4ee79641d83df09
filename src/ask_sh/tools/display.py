"""Boxed spinner shown while a command runs."""

from __future__ import annotations

from rich import box
from rich.console import Console, RenderableType
from rich.live import Live
from rich.panel import Panel
from rich.spinner import Spinner
from rich.text import Text

SUCCESS_GLYPH = "✓"
FAILURE_GLYPH = "✗"


class CommandStatus:
    """A rounded box with a spinner and the command, then ✓ or ✗.

    Usage:
        status = CommandStatus("df -h", console)
        status.start()
        ...
        status.finish(success=True)
    """

    def __init__(self, command: str, console: Console) -> None:
        self._command = command
        self._console = console
        self._live: Live | None = None

    def _box(self, body: RenderableType) -> Panel:
        return Panel(body, box=box.ROUNDED, expand=False)

    def start(self) -> None:
        spinner = Spinner("dots", text=Text(self._command), style="bold cyan")
        self._live = Live(
            self._box(spinner),
            console=self._console,
            refresh_per_second=8,
            transient=False,
        )
        self._live.start()

    def finish(self, success: bool) -> None:
        glyph = Text(SUCCESS_GLYPH, style="green") if success else Text(FAILURE_GLYPH, style="red")
        final = self._box(Text.assemble(glyph, " ", self._command))

        if self._live is None:
            self._console.print(final)
            return

        self._live.update(final, refresh=True)
        self._live.stop()
        self._live = None
