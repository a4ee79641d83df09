"""Printing the model's reply text."""

from __future__ import annotations

from rich.console import Console
from rich.markdown import Markdown


class ReplyRenderer:
    """Writes reply text as it streams, or once as Markdown.

    In streaming mode every fragment is written immediately and unstyled.
    In markdown mode fragments are buffered until ``finish()``.
    """

    def __init__(self, console: Console, *, markdown: bool = False) -> None:
        self._console = console
        self._markdown = markdown
        self._parts: list[str] = []

    def write(self, text: str) -> None:
        if not text:
            return
        self._parts.append(text)
        if not self._markdown:
            self._console.print(text, end="", markup=False, highlight=False, soft_wrap=True)

    def finish(self) -> None:
        """End the current reply."""
        text = "".join(self._parts)
        self._parts.clear()
        if not text.strip():
            return

        if self._markdown:
            self._console.print(Markdown(text))
        else:
            self._console.print()
