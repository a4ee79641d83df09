"""Route model tool calls to tool implementations."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from rich.console import Console

from ask_sh.config.schema import Config
from ask_sh.core.llm.provider import ToolCall
from ask_sh.logging import get_logger
from ask_sh.terminal import TerminalSession
from ask_sh.tools.approval import ApprovalPrompter, ConsoleApprovalPrompter
from ask_sh.tools.base import Tool, ToolCallResult
from ask_sh.tools.execute_command import (
    ExecuteCommandTool,
    SessionFactory,
    execute_command_schema,
)
from ask_sh.tools.web_search import SearxngClient, WebSearchTool, web_search_schema

log = get_logger("tools")


class ToolDispatcher:
    """Holds the run's tools and executes the calls of one model turn."""

    def __init__(self, tools: Iterable[Tool]) -> None:
        self._tools: dict[str, Tool] = {tool.name: tool for tool in tools}

    @classmethod
    def from_config(
        cls,
        config: Config,
        *,
        console: Console,
        prompter: ApprovalPrompter | None = None,
        session_factory: SessionFactory | None = None,
    ) -> ToolDispatcher:
        """Register execute_command, plus web_search when SearXNG is configured."""
        if session_factory is None:
            terminal = config.terminal

            async def session_factory() -> TerminalSession:
                return await TerminalSession.open(terminal.session_name, config=terminal)

        tools: list[Tool] = [
            ExecuteCommandTool(session_factory, prompter or ConsoleApprovalPrompter(), console)
        ]

        search = config.search
        if search.searxng_base_url:
            client = SearxngClient(
                search.searxng_base_url,
                engines=search.engines,
                max_results=search.max_results,
                timeout=search.timeout,
            )
            tools.append(WebSearchTool(client, console))

        return cls(tools)

    @property
    def tools(self) -> Mapping[str, Tool]:
        return dict(self._tools)

    @property
    def schemas(self) -> list[dict[str, Any]]:
        """Tool declarations in registration order."""
        return [tool.schema for tool in self._tools.values()]

    async def dispatch(self, call: ToolCall) -> ToolCallResult:
        tool = self._tools.get(call.name)
        if tool is None:
            log.warning("Model called unknown tool %r", call.name)
            return ToolCallResult(call, f"Unknown tool: {call.name}")
        log.debug("Dispatching %s(%s)", call.name, call.arguments)
        return await tool.run(call)

    async def dispatch_all(self, calls: Sequence[ToolCall]) -> list[ToolCallResult]:
        """Run all calls of one turn concurrently and wait for every one.

        Results come back in call order. A tool that raises yields an error
        result instead of failing the turn.
        """
        outcomes = await asyncio.gather(
            *(self.dispatch(call) for call in calls), return_exceptions=True
        )

        results: list[ToolCallResult] = []
        for call, outcome in zip(calls, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                log.error("Tool %s raised: %s", call.name, outcome, exc_info=outcome)
                outcome = ToolCallResult(call, f"Error: {outcome}")
            results.append(outcome)
        return results

    async def aclose(self) -> None:
        """Close every tool, terminating the terminal session if one was opened."""
        for tool in self._tools.values():
            await tool.aclose()


def available_tools(config: Config) -> list[dict[str, Any]]:
    """Tool declarations a run with this config offers the model."""
    tools = [execute_command_schema()]
    if config.search.searxng_base_url:
        tools.append(web_search_schema())
    return tools
