"""Errors raised while driving the terminal session."""

from __future__ import annotations


class TerminalError(Exception):
    """Base class for terminal session failures.

    These never abort a run: the tool layer turns them into error text
    that is handed back to the model.
    """


class SessionError(TerminalError):
    """The multiplexer is missing or the session could not be created."""


class CommandTimeoutError(TerminalError):
    """The completion marker did not show up within the polling budget."""

    def __init__(self, command: str, waited: float) -> None:
        super().__init__(f"Command timeout after {waited:.1f}s: {command}")
        self.command = command
        self.waited = waited


class CaptureError(TerminalError):
    """Reading the pane contents failed."""
