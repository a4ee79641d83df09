"""tmux adapter for the Multiplexer port."""

from __future__ import annotations

import asyncio
import os

from ask_sh.logging import TRACE, get_logger
from ask_sh.terminal.errors import SessionError
from ask_sh.terminal.result import CaptureResult

log = get_logger("terminal.tmux")


class TmuxMultiplexer:
    """Drive tmux through its command-line client.

    Every call is one ``tmux`` subprocess. ``TMUX`` is removed from the
    child environment so the client never refuses to nest when ask-sh
    itself runs inside tmux.
    """

    def __init__(self, executable: str = "tmux") -> None:
        self._executable = executable

    def build_args(self, *args: str) -> list[str]:
        return [self._executable, *args]

    async def _run(self, *args: str) -> CaptureResult:
        cmd = self.build_args(*args)
        env = os.environ.copy()
        env.pop("TMUX", None)

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=env,
            )
        except FileNotFoundError as e:
            raise SessionError(f"{self._executable} is not installed") from e
        except PermissionError as e:
            raise SessionError(f"Permission denied: {self._executable}") from e

        stdout, stderr = await process.communicate()
        result = CaptureResult(
            returncode=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )
        log.log(TRACE, "%s -> %r", " ".join(cmd), result)
        return result

    async def start_server(self) -> None:
        await self._run("start-server")

    async def has_session(self, name: str) -> bool:
        result = await self._run("has-session", "-t", name)
        return result.success

    async def new_session(self, name: str) -> None:
        result = await self._run("new-session", "-d", "-s", name)
        if not result.success:
            raise SessionError(f"Failed to create session: {result.stderr.strip()}")

    async def new_pane(self, session: str) -> str:
        result = await self._run("new-window", "-d", "-t", session, "-P", "-F", "#{pane_id}")
        pane_id = result.stdout.strip()
        if not result.success or not pane_id:
            raise SessionError(f"Failed to open a window in {session}: {result.stderr.strip()}")
        return pane_id

    async def send_text(self, target: str, text: str) -> None:
        # -l sends the text as typed, so words like "Enter" are not key names
        await self._run("send-keys", "-t", target, "-l", text)
        await self._run("send-keys", "-t", target, "Enter")

    async def send_keys(self, target: str, *keys: str) -> None:
        await self._run("send-keys", "-t", target, *keys)

    async def capture(self, target: str, *, full_history: bool = False) -> CaptureResult:
        if full_history:
            return await self._run("capture-pane", "-pJ", "-t", target, "-S", "-", "-E", "-")
        return await self._run("capture-pane", "-p", "-t", target)

    async def resize_window(self, target: str, width: int) -> None:
        await self._run("set-option", "-g", "window-size", "manual")
        await self._run("resize-window", "-t", target, "-x", str(width))

    async def clear_history(self, target: str) -> None:
        await self._run("clear-history", "-t", target)

    async def kill_session(self, name: str) -> None:
        await self._run("kill-session", "-t", name)

    async def kill_pane(self, target: str) -> None:
        await self._run("kill-pane", "-t", target)
