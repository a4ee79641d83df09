"""Multiplexer call result dataclass."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CaptureResult:
    """Output of one multiplexer CLI invocation.

    Attributes:
        returncode: Exit status of the multiplexer client.
        stdout: Decoded standard output (pane text for captures).
        stderr: Decoded standard error.
    """

    returncode: int
    stdout: str
    stderr: str = ""

    @property
    def success(self) -> bool:
        """True if the multiplexer call exited with status 0."""
        return self.returncode == 0

    def __repr__(self) -> str:
        lines = self.stdout.count("\n") + 1 if self.stdout else 0
        if self.success:
            return f"<CaptureResult ok, {lines} lines>"
        return f"<CaptureResult exit={self.returncode}, stderr={self.stderr.strip()!r}>"
