"""Multiplexer port used by TerminalSession."""

from __future__ import annotations

from typing import Protocol

from ask_sh.terminal.result import CaptureResult


class Multiplexer(Protocol):
    """Narrow interface over a terminal multiplexer.

    Implementations:
    - TmuxMultiplexer: shells out to the tmux CLI

    Targets are whatever the multiplexer accepts for ``-t`` (a session
    name or a pane id).
    """

    async def start_server(self) -> None:
        """Start the multiplexer server if it is not running."""
        ...

    async def has_session(self, name: str) -> bool:
        """Return True if a session with this name exists."""
        ...

    async def new_session(self, name: str) -> None:
        """Create a detached session.

        Raises:
            SessionError: If the session could not be created.
        """
        ...

    async def new_pane(self, session: str) -> str:
        """Open a fresh pane inside an existing session and return its id."""
        ...

    async def send_text(self, target: str, text: str) -> None:
        """Type ``text`` literally into the pane and press Enter."""
        ...

    async def send_keys(self, target: str, *keys: str) -> None:
        """Send named keys (``C-l``, ``Enter``) to the pane."""
        ...

    async def capture(self, target: str, *, full_history: bool = False) -> CaptureResult:
        """Capture the visible pane, or the whole scrollback with joined lines."""
        ...

    async def resize_window(self, target: str, width: int) -> None:
        """Pin the window to a fixed width."""
        ...

    async def clear_history(self, target: str) -> None:
        """Drop the pane's scrollback."""
        ...

    async def kill_session(self, name: str) -> None:
        """Destroy the named session and nothing else."""
        ...

    async def kill_pane(self, target: str) -> None:
        """Destroy a single pane."""
        ...
