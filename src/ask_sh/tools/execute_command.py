"""The execute_command tool: approval gate plus terminal execution."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from rich.console import Console

from ask_sh.core.llm.provider import ToolCall
from ask_sh.logging import get_logger
from ask_sh.safety import classify
from ask_sh.terminal import TerminalError, TerminalSession
from ask_sh.tools.approval import APPROVAL_QUESTION, ApprovalPrompter
from ask_sh.tools.base import ToolCallResult, function_schema
from ask_sh.tools.display import CommandStatus

log = get_logger("tools.execute_command")

EXECUTE_COMMAND = "execute_command"
REJECTED_CONTENT = "Command rejected by the user."

SessionFactory = Callable[[], Awaitable[TerminalSession]]


def execute_command_schema() -> dict[str, Any]:
    return function_schema(
        EXECUTE_COMMAND,
        "Execute a shell command when the user asks to run terminal commands, "
        "check system status, or perform local operations",
        {"command": {"type": "string", "description": "The shell command to execute"}},
    )


class ExecuteCommandTool:
    """Runs shell commands in the run's terminal session.

    The session is opened on the first approved command and reused for the
    rest of the run. Calls are serialized, approval prompt included: the
    session runs one command at a time and prompts must not interleave.
    """

    name = EXECUTE_COMMAND

    def __init__(
        self,
        session_factory: SessionFactory,
        prompter: ApprovalPrompter,
        console: Console,
    ) -> None:
        self._session_factory = session_factory
        self._prompter = prompter
        self._console = console
        self._session: TerminalSession | None = None
        self._lock = asyncio.Lock()

    @property
    def schema(self) -> dict[str, Any]:
        return execute_command_schema()

    @property
    def session(self) -> TerminalSession | None:
        """The terminal session, once a command has needed one."""
        return self._session

    async def _get_session(self) -> TerminalSession:
        if self._session is None:
            self._session = await self._session_factory()
        return self._session

    async def run(self, call: ToolCall) -> ToolCallResult:
        command = call.arguments.get("command")
        if not isinstance(command, str) or not command.strip():
            return ToolCallResult(call, "Error: execute_command requires a non-empty 'command' argument")
        command = command.strip()

        async with self._lock:
            decision = classify(command)
            if decision.needs_approval:
                approved = await self._prompter.confirm(
                    APPROVAL_QUESTION, f"{command} ({decision.reason})"
                )
                self._console.print()
                if not approved:
                    log.debug("User declined: %s", command)
                    CommandStatus(command, self._console).finish(success=False)
                    return ToolCallResult(call, REJECTED_CONTENT)

            status = CommandStatus(command, self._console)
            status.start()
            try:
                session = await self._get_session()
                output = await session.execute(command)
            except TerminalError as e:
                log.warning("Command failed: %s", e)
                status.finish(success=False)
                return ToolCallResult(call, str(e))
            except BaseException:
                status.finish(success=False)
                raise

            status.finish(success=True)
            return ToolCallResult(call, output)

    async def aclose(self) -> None:
        if self._session is not None:
            try:
                await self._session.terminate()
            except TerminalError as e:
                log.warning("Failed to terminate terminal session: %s", e)
            self._session = None
