"""A scriptable shell living in a multiplexer pane."""

from __future__ import annotations

import asyncio

from ask_sh.config.schema import TerminalConfig
from ask_sh.logging import TRACE, get_logger
from ask_sh.terminal.errors import CaptureError, CommandTimeoutError, SessionError
from ask_sh.terminal.protocol import Multiplexer
from ask_sh.terminal.scrape import (
    clean_output,
    extract_prompt_line,
    make_marker,
    marker_found,
    wrap_command,
)
from ask_sh.terminal.tmux import TmuxMultiplexer

log = get_logger("terminal")


class TerminalSession:
    """Runs commands in a multiplexer pane and scrapes their output.

    Create with ``await TerminalSession.open(name)``. If a session with that
    name already exists a new pane is opened in it and only that pane is
    owned; otherwise the session is created and owned. ``terminate()``
    destroys exactly what is owned.

    One session serves a whole run. Commands must not overlap: the pane is
    cleared and scraped around each one.
    """

    def __init__(
        self,
        mux: Multiplexer,
        session_name: str,
        target: str,
        *,
        owns_session: bool,
        config: TerminalConfig | None = None,
    ) -> None:
        self._mux = mux
        self._session_name = session_name
        self._target = target
        self._owns_session = owns_session
        self._config = config or TerminalConfig()
        self._prompt = ""
        self._closed = False

    @classmethod
    async def open(
        cls,
        session_name: str | None = None,
        *,
        mux: Multiplexer | None = None,
        config: TerminalConfig | None = None,
    ) -> TerminalSession:
        """Attach to or create the named session and fingerprint its prompt.

        Raises:
            SessionError: If the multiplexer is missing or the session
                cannot be created.
        """
        config = config or TerminalConfig()
        mux = mux or TmuxMultiplexer()
        name = session_name or config.session_name

        await mux.start_server()

        if await mux.has_session(name):
            target = await mux.new_pane(name)
            session = cls(mux, name, target, owns_session=False, config=config)
            log.debug("Attached to existing session %s in pane %s", name, target)
        else:
            await mux.new_session(name)
            await asyncio.sleep(config.startup_delay)
            if not await mux.has_session(name):
                raise SessionError(f"Session {name} created but not found")
            session = cls(mux, name, name, owns_session=True, config=config)
            log.debug("Created session %s", name)

        await session.capture_prompt()
        return session

    @property
    def session_name(self) -> str:
        return self._session_name

    @property
    def target(self) -> str:
        return self._target

    @property
    def prompt(self) -> str:
        """Trailing-line fingerprint of the shell prompt ("" if unknown)."""
        return self._prompt

    @property
    def owns_session(self) -> bool:
        return self._owns_session

    @property
    def closed(self) -> bool:
        return self._closed

    async def capture_prompt(self) -> str:
        """Press Enter on an empty line and remember the prompt it redraws."""
        await self._mux.send_keys(self._target, "Enter")

        for _ in range(self._config.prompt_max_attempts):
            await asyncio.sleep(self._config.prompt_poll_interval)
            capture = await self._mux.capture(self._target)
            prompt = extract_prompt_line(capture.stdout)
            if prompt:
                self._prompt = prompt
                break
        else:
            log.debug("No prompt seen in %s; output cleaning will not trim it", self._target)

        log.debug("Prompt fingerprint: %r", self._prompt)
        return self._prompt

    async def execute(self, command: str) -> str:
        """Run a command and return its cleaned output.

        If the pane capture reports an error before the marker shows up,
        that error text is returned as the output.

        Raises:
            SessionError: If the session was terminated.
            CommandTimeoutError: If the marker never appeared.
            CaptureError: If the final scrollback capture failed.
        """
        if self._closed:
            raise SessionError(f"Session {self._session_name} is closed")

        config = self._config
        marker = make_marker()

        await self._mux.resize_window(self._target, config.window_width)
        await self._mux.clear_history(self._target)
        await self._mux.send_keys(self._target, "C-l")
        await asyncio.sleep(config.clear_delay)

        log.debug("Executing in %s: %s", self._target, command)
        await self._mux.send_text(self._target, wrap_command(command, marker))

        for _ in range(config.max_attempts):
            await asyncio.sleep(config.poll_interval)
            capture = await self._mux.capture(self._target)
            if marker_found(capture.stdout, marker):
                break
            error = capture.stderr.strip()
            if error:
                log.debug("Capture reported an error: %s", error)
                return error
        else:
            raise CommandTimeoutError(command, config.poll_interval * config.max_attempts)

        final = await self._mux.capture(self._target, full_history=True)
        if not final.success:
            raise CaptureError(f"Failed to capture scrollback: {final.stderr.strip()}")

        log.log(TRACE, "Scrollback for %s:\n%s", command, final.stdout)
        return clean_output(final.stdout, marker, self._prompt)

    async def terminate(self) -> None:
        """Destroy the owned session or pane. Safe to call twice."""
        if self._closed:
            return
        self._closed = True

        if self._owns_session:
            await self._mux.kill_session(self._session_name)
        else:
            await self._mux.kill_pane(self._target)
        log.debug("Terminated %s", self._target)
