"""Tests for tools: execute_command, web_search and the dispatcher."""

from __future__ import annotations

import io
import json

import httpx
import pytest
from rich.console import Console

from ask_sh.config import Config, SearchConfig
from ask_sh.core.llm import ToolCall
from ask_sh.terminal import CommandTimeoutError
from ask_sh.tools import (
    APPROVAL_QUESTION,
    REJECTED_CONTENT,
    CommandStatus,
    ExecuteCommandTool,
    SearxngClient,
    ToolCallResult,
    ToolDispatcher,
    ToolError,
    WebSearchTool,
    available_tools,
    function_schema,
    parse_answer,
)
from tests.utils import (
    DelayedTool,
    FailingSession,
    FakeSession,
    RecordingPrompter,
    session_factory_for,
)


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False, width=100)


def output_of(console: Console) -> str:
    return console.file.getvalue()


def command_call(command, call_id: str | None = None) -> ToolCall:
    return ToolCall("execute_command", {"command": command}, id=call_id)


class TestToolCallResult:
    """Tests for the result payload."""

    def test_to_dict(self):
        result = ToolCallResult(command_call("ls"), "file.txt")
        assert result.to_dict() == {
            "function_call": {"name": "execute_command", "arguments": {"command": "ls"}},
            "content": "file.txt",
        }

    def test_function_schema(self):
        schema = function_schema("t", "does t", {"x": {"type": "string"}})
        assert schema["type"] == "function"
        assert schema["function"]["parameters"]["required"] == ["x"]


class TestApprovalAnswers:
    """Only y/yes approves."""

    def test_yes(self):
        for answer in ("y", "Y", "yes", " YES "):
            assert parse_answer(answer) is True, answer

    def test_everything_else_declines(self):
        for answer in (None, "", "n", "no", "yep", "sure"):
            assert parse_answer(answer) is False, answer


class TestExecuteCommandTool:
    """Tests for the execute_command tool."""

    @pytest.mark.asyncio
    async def test_safe_command_runs_without_prompt(self, console):
        session = FakeSession({"df -h": "/dev/sda1 100G"})
        prompter = RecordingPrompter(answer=False)
        tool = ExecuteCommandTool(session_factory_for(session), prompter, console)

        result = await tool.run(command_call("df -h"))

        assert result.content == "/dev/sda1 100G"
        assert prompter.asked == []
        assert session.executed == ["df -h"]
        assert "✓" in output_of(console)

    @pytest.mark.asyncio
    async def test_declined_never_touches_session(self, console):
        factory = session_factory_for(FailingSession())
        prompter = RecordingPrompter(answer=False)
        tool = ExecuteCommandTool(factory, prompter, console)

        result = await tool.run(command_call("rm -rf build"))

        assert result.content == REJECTED_CONTENT
        assert factory.calls == 0
        assert prompter.asked == [(APPROVAL_QUESTION, "rm -rf build (modifies files or system state)")]
        assert "✗" in output_of(console)

        # Nothing was opened, so closing must not touch the session either
        await tool.aclose()

    @pytest.mark.asyncio
    async def test_approved_command_runs(self, console):
        session = FakeSession({"git push": "Everything up-to-date"})
        prompter = RecordingPrompter(answer=True)
        tool = ExecuteCommandTool(session_factory_for(session), prompter, console)

        result = await tool.run(command_call("git push"))

        assert result.content == "Everything up-to-date"
        assert prompter.asked[0][1] == "git push (modifies git repository or remote)"

    @pytest.mark.asyncio
    async def test_terminal_error_becomes_content(self, console):
        class TimingOutSession(FakeSession):
            async def execute(self, command):
                raise CommandTimeoutError(command, 10.0)

        tool = ExecuteCommandTool(
            session_factory_for(TimingOutSession()), RecordingPrompter(True), console
        )
        result = await tool.run(command_call("top"))

        assert "Command timeout" in result.content
        assert "✗" in output_of(console)

    @pytest.mark.asyncio
    async def test_missing_command(self, console):
        factory = session_factory_for(FailingSession())
        prompter = RecordingPrompter(answer=True)
        tool = ExecuteCommandTool(factory, prompter, console)

        for call in (ToolCall("execute_command", {}), command_call("  "), command_call(42)):
            result = await tool.run(call)
            assert result.content.startswith("Error:")

        assert prompter.asked == []
        assert factory.calls == 0

    @pytest.mark.asyncio
    async def test_session_opened_once_and_closed(self, console):
        session = FakeSession({"pwd": "/home", "ls": "a"})
        factory = session_factory_for(session)
        tool = ExecuteCommandTool(factory, RecordingPrompter(True), console)

        await tool.run(command_call("pwd"))
        await tool.run(command_call("ls"))
        await tool.aclose()

        assert factory.calls == 1
        assert session.executed == ["pwd", "ls"]
        assert session.terminated is True
        assert tool.session is None


class TestCommandStatus:
    """Tests for the boxed status display."""

    def test_success_box(self, console):
        status = CommandStatus("df -h", console)
        status.start()
        status.finish(success=True)

        text = output_of(console)
        assert "✓ df -h" in text
        assert "╭" in text and "╰" in text

    def test_failure_without_start(self, console):
        CommandStatus("rm x", console).finish(success=False)
        assert "✗ rm x" in output_of(console)


def searxng_handler(seen: list[httpx.Request], status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if status != 200:
            return httpx.Response(status, text="rate limited")
        results = [
            {"title": f"Result {i}", "url": f"https://example.com/{i}", "content": f"text {i}"}
            for i in range(8)
        ]
        results[0]["img_src"] = "https://example.com/0.png"
        return httpx.Response(200, json={"query": "tmux", "results": results})

    return handler


class TestWebSearch:
    """Tests for the SearXNG client and tool."""

    @pytest.mark.asyncio
    async def test_search_request_and_top_results(self):
        seen: list[httpx.Request] = []
        client = SearxngClient(
            "http://searx.local/",
            client=httpx.AsyncClient(transport=httpx.MockTransport(searxng_handler(seen))),
        )

        results = await client.search("tmux")
        await client.aclose()

        assert len(results) == 5
        assert results[0].img_src == "https://example.com/0.png"
        assert results[1].img_src is None
        request = seen[0]
        assert request.url.path == "/search"
        assert request.url.params["q"] == "tmux"
        assert request.url.params["format"] == "json"
        assert request.url.params["engines"] == "google,bing,duckduckgo"
        assert request.headers["user-agent"].startswith("ask-sh")

    @pytest.mark.asyncio
    async def test_error_status(self):
        client = SearxngClient(
            "http://searx.local",
            client=httpx.AsyncClient(transport=httpx.MockTransport(searxng_handler([], status=429))),
        )
        with pytest.raises(ToolError) as exc_info:
            await client.search("tmux")
        assert "429" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_tool_result(self, console):
        client = SearxngClient(
            "http://searx.local",
            max_results=2,
            client=httpx.AsyncClient(transport=httpx.MockTransport(searxng_handler([]))),
        )
        tool = WebSearchTool(client, console)

        result = await tool.run(ToolCall("web_search", {"query": "tmux"}))

        assert result.content == [
            {"title": "Result 0", "url": "https://example.com/0", "content": "text 0", "img_src": "https://example.com/0.png"},
            {"title": "Result 1", "url": "https://example.com/1", "content": "text 1", "img_src": None},
        ]
        assert "Searching with SearXNG: 'tmux'" in output_of(console)
        assert "Processing 2 search results" in output_of(console)

    @pytest.mark.asyncio
    async def test_tool_failure_is_content(self, console):
        client = SearxngClient(
            "http://searx.local",
            client=httpx.AsyncClient(transport=httpx.MockTransport(searxng_handler([], status=500))),
        )
        result = await WebSearchTool(client, console).run(ToolCall("web_search", {"query": "x"}))
        assert result.content.startswith("Error: SearXNG API error: 500")


class TestAvailableTools:
    """Which tools are offered to the model."""

    def test_execute_command_only(self):
        tools = available_tools(Config())
        assert [t["function"]["name"] for t in tools] == ["execute_command"]
        assert tools[0]["function"]["parameters"]["required"] == ["command"]

    def test_with_search(self):
        config = Config(search=SearchConfig(searxng_base_url="http://searx.local"))
        assert [t["function"]["name"] for t in available_tools(config)] == [
            "execute_command",
            "web_search",
        ]

    def test_dispatcher_matches(self, console):
        config = Config(search=SearchConfig(searxng_base_url="http://searx.local"))
        dispatcher = ToolDispatcher.from_config(
            config, console=console, prompter=RecordingPrompter(False)
        )
        assert dispatcher.schemas == available_tools(config)
        assert set(dispatcher.tools) == {"execute_command", "web_search"}


class TestToolDispatcher:
    """Tests for routing and concurrent dispatch."""

    @pytest.mark.asyncio
    async def test_unknown_tool(self):
        dispatcher = ToolDispatcher([])
        result = await dispatcher.dispatch(ToolCall("launch_rockets", {}))
        assert result.content == "Unknown tool: launch_rockets"

    @pytest.mark.asyncio
    async def test_concurrent_calls_all_returned_in_order(self):
        finished: list[str] = []
        tool = DelayedTool("slow", {"a": 0.05, "b": 0.0, "c": 0.02}, finished)
        dispatcher = ToolDispatcher([tool])
        calls = [ToolCall("slow", {"key": key}) for key in ("a", "b", "c")]

        results = await dispatcher.dispatch_all(calls)

        assert [r.content for r in results] == ["done a", "done b", "done c"]
        assert [r.function_call for r in results] == calls
        # They really ran concurrently: completion order follows the delays
        assert finished == ["b", "c", "a"]

    @pytest.mark.asyncio
    async def test_raising_tool_becomes_error_result(self):
        class BrokenTool(DelayedTool):
            async def run(self, call):
                raise RuntimeError("kaboom")

        dispatcher = ToolDispatcher([BrokenTool("broken", {}, []), DelayedTool("ok", {"x": 0}, [])])
        results = await dispatcher.dispatch_all([
            ToolCall("broken", {}),
            ToolCall("ok", {"key": "x"}),
        ])

        assert results[0].content == "Error: kaboom"
        assert results[1].content == "done x"

    @pytest.mark.asyncio
    async def test_execute_commands_serialized(self, console):
        session = FakeSession({"sleep 1": "", "ls": "a"}, delays={"sleep 1": 0.05})
        dispatcher = ToolDispatcher.from_config(
            Config(),
            console=console,
            prompter=RecordingPrompter(True),
            session_factory=session_factory_for(session),
        )

        results = await dispatcher.dispatch_all([command_call("sleep 1"), command_call("ls")])
        await dispatcher.aclose()

        assert [r.content for r in results] == ["", "a"]
        assert session.executed == ["sleep 1", "ls"]
        assert session.terminated is True
        json.dumps([r.to_dict() for r in results])

    @pytest.mark.asyncio
    async def test_aclose_closes_every_tool(self):
        tools = [DelayedTool("a", {}, []), DelayedTool("b", {}, [])]
        await ToolDispatcher(tools).aclose()
        assert all(t.closed for t in tools)
