"""Shared test utilities and test doubles for ask-sh tests."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Sequence
from typing import Any
from unittest.mock import Mock

from ask_sh.core.llm.provider import (
    BaseChatProvider,
    Message,
    ResponseChunk,
    ToolCall,
)
from ask_sh.terminal.result import CaptureResult
from ask_sh.tools.base import ToolCallResult


def create_mock_stream_chunk(
    text: str | None = None,
    tool_calls: list[Any] | None = None,
) -> Mock:
    """Create a mock streaming chunk from LiteLLM.

    Args:
        text: Delta text content (None for tool-only chunks)
        tool_calls: Tool call deltas carried by this chunk

    Returns:
        Mock mimicking litellm's ModelResponseStream structure
    """
    chunk = Mock()
    chunk.choices = [Mock()]
    chunk.choices[0].delta = Mock()
    chunk.choices[0].delta.content = text
    chunk.choices[0].delta.tool_calls = tool_calls
    return chunk


def create_mock_tool_delta(
    index: int,
    call_id: str | None = None,
    name: str | None = None,
    arguments: str | None = None,
) -> Mock:
    """Create one streamed tool-call delta."""
    delta = Mock()
    delta.index = index
    delta.id = call_id
    delta.function = Mock()
    delta.function.name = name
    delta.function.arguments = arguments
    return delta


async def mock_stream(chunks: Sequence[Any]) -> AsyncIterator[Any]:
    """Async generator over prepared chunks, like a litellm stream."""
    for chunk in chunks:
        yield chunk


class ScriptedProvider(BaseChatProvider):
    """Chat provider that replays prepared replies, one per stream_reply call.

    A reply entry may also be an exception instance, raised instead of
    streaming.
    """

    name = "scripted"

    def __init__(self, replies: Sequence[Sequence[ResponseChunk] | Exception]) -> None:
        super().__init__("scripted-model")
        self._replies = list(replies)
        self.sent: list[Message] = []
        self.closed = False

    async def stream_reply(self, message: Message) -> AsyncIterator[ResponseChunk]:
        self._history.append(message)
        self.sent.append(message)
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        for chunk in reply:
            yield chunk

    async def aclose(self) -> None:
        self.closed = True


def tool_call_chunk(*calls: ToolCall) -> ResponseChunk:
    return ResponseChunk(tool_calls=tuple(calls))


class FakeMultiplexer:
    """In-memory Multiplexer that simulates a shell pane.

    Typed commands are "run" immediately: the next capture shows the typed
    line, the prepared output for that command and the marker echo.
    """

    def __init__(
        self,
        outputs: dict[str, str] | None = None,
        *,
        prompt: str = "user@host:~$ ",
        existing_sessions: Sequence[str] = (),
        marker_delay: int = 0,
    ) -> None:
        self.outputs = outputs or {}
        self.prompt = prompt
        self.sessions = set(existing_sessions)
        self.marker_delay = marker_delay
        self.calls: list[tuple[Any, ...]] = []
        self.screen: list[str] = []
        self.killed_sessions: list[str] = []
        self.killed_panes: list[str] = []
        self._pending_marker_captures = 0
        self._next_pane = 1

    async def start_server(self) -> None:
        self.calls.append(("start_server",))

    async def has_session(self, name: str) -> bool:
        self.calls.append(("has_session", name))
        return name in self.sessions

    async def new_session(self, name: str) -> None:
        self.calls.append(("new_session", name))
        self.sessions.add(name)

    async def new_pane(self, session: str) -> str:
        self.calls.append(("new_pane", session))
        pane = f"%{self._next_pane}"
        self._next_pane += 1
        return pane

    async def send_text(self, target: str, text: str) -> None:
        self.calls.append(("send_text", target, text))
        command, _, marker = text.rpartition(" && echo ")
        self.screen.append(self.prompt + text)
        self.screen.extend(self.outputs.get(command, "").splitlines())
        self.screen.append(marker)
        self.screen.append(self.prompt)
        self._pending_marker_captures = self.marker_delay

    async def send_keys(self, target: str, *keys: str) -> None:
        self.calls.append(("send_keys", target, *keys))
        if keys == ("Enter",):
            self.screen.append(self.prompt)
        elif keys == ("C-l",):
            self.screen = []

    async def capture(self, target: str, *, full_history: bool = False) -> CaptureResult:
        self.calls.append(("capture", target, full_history))
        if not full_history and self._pending_marker_captures > 0:
            self._pending_marker_captures -= 1
            # Command still running: only the typed line is visible
            return CaptureResult(0, "\n".join(self.screen[:1]) + "\n")
        return CaptureResult(0, "\n".join(self.screen) + "\n")

    async def resize_window(self, target: str, width: int) -> None:
        self.calls.append(("resize_window", target, width))

    async def clear_history(self, target: str) -> None:
        self.calls.append(("clear_history", target))

    async def kill_session(self, name: str) -> None:
        self.calls.append(("kill_session", name))
        self.killed_sessions.append(name)
        self.sessions.discard(name)

    async def kill_pane(self, target: str) -> None:
        self.calls.append(("kill_pane", target))
        self.killed_panes.append(target)


class FakeSession:
    """Stands in for TerminalSession; returns prepared output per command."""

    def __init__(self, outputs: dict[str, str] | None = None, delays: dict[str, float] | None = None) -> None:
        self.outputs = outputs or {}
        self.delays = delays or {}
        self.executed: list[str] = []
        self.terminated = False

    async def execute(self, command: str) -> str:
        await asyncio.sleep(self.delays.get(command, 0))
        self.executed.append(command)
        return self.outputs.get(command, "")

    async def terminate(self) -> None:
        self.terminated = True


class FailingSession:
    """Session stub that fails the test if it is ever used."""

    async def execute(self, command: str) -> str:
        raise AssertionError(f"terminal session must not be used (got {command!r})")

    async def terminate(self) -> None:
        raise AssertionError("terminal session must not be used")


def session_factory_for(session: Any):
    """Build a session factory that counts how often it was called."""

    async def factory():
        factory.calls += 1
        return session

    factory.calls = 0
    return factory


class RecordingPrompter:
    """Approval prompter with a fixed answer that records its questions."""

    def __init__(self, answer: bool) -> None:
        self.answer = answer
        self.asked: list[tuple[str, str]] = []

    async def confirm(self, question: str, help_text: str) -> bool:
        self.asked.append((question, help_text))
        return self.answer


class DelayedTool:
    """Tool that answers after a delay, for concurrency tests."""

    def __init__(self, name: str, delays: dict[str, float], log: list[str]) -> None:
        self.name = name
        self.delays = delays
        self.log = log
        self.closed = False

    @property
    def schema(self) -> dict[str, Any]:
        return {"type": "function", "function": {"name": self.name}}

    async def run(self, call: ToolCall) -> ToolCallResult:
        key = call.arguments["key"]
        await asyncio.sleep(self.delays[key])
        self.log.append(key)
        return ToolCallResult(call, f"done {key}")

    async def aclose(self) -> None:
        self.closed = True
