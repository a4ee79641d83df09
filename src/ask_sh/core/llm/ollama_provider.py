"""Ollama native chat API backend.

The response is newline-delimited JSON, one object per line, not an event
stream. Each line may carry a fragment of the assistant message and/or a
complete list of tool calls.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from ask_sh.core.llm.errors import ApiError, NetworkError
from ask_sh.core.llm.provider import (
    BaseChatProvider,
    Message,
    ResponseChunk,
    Role,
    ToolCall,
)

_log = logging.getLogger("ask_sh.llm.ollama")

DEFAULT_OLLAMA_URL = "http://localhost:11434/api"


def parse_tool_calls(raw_calls: Any) -> tuple[ToolCall, ...]:
    """Convert Ollama's ``message.tool_calls`` into ToolCalls."""
    calls = []
    for raw in raw_calls or []:
        function = raw.get("function") or {}
        arguments = function.get("arguments") or {}
        if isinstance(arguments, str):
            try:
                arguments = json.loads(arguments)
            except json.JSONDecodeError:
                _log.warning("Tool call %r has malformed arguments: %r", function.get("name"), arguments)
                arguments = {}
        if not isinstance(arguments, dict):
            arguments = {}
        calls.append(ToolCall(name=function.get("name", ""), arguments=arguments, id=raw.get("id")))
    return tuple(calls)


def parse_ndjson_line(line: str) -> ResponseChunk | None:
    """Parse one line of the stream.

    Returns None for blank or undecodable lines and for lines with neither
    content nor tool calls.

    Raises:
        ApiError: If the line is an in-stream ``{"error": ...}`` object.
    """
    if not line.strip():
        return None

    try:
        data = json.loads(line)
    except json.JSONDecodeError:
        _log.debug("Skipping undecodable line: %r", line)
        return None

    if not isinstance(data, dict):
        return None

    if data.get("error"):
        raise ApiError(None, str(data["error"]))

    message = data.get("message") or {}
    content = message.get("content") or ""
    tool_calls = parse_tool_calls(message.get("tool_calls"))

    if not content and not tool_calls:
        return None
    return ResponseChunk(text=content, tool_calls=tool_calls)


class OllamaProvider(BaseChatProvider):
    """Chat provider for a local (or remote) Ollama server."""

    name = "ollama"

    def __init__(
        self,
        model: str,
        *,
        base_url: str | None = None,
        keep_alive: int | None = None,
        context_length: int | None = None,
        tools: list[dict[str, Any]] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(model)
        self._base_url = (base_url or DEFAULT_OLLAMA_URL).rstrip("/")
        self._keep_alive = keep_alive
        self._context_length = context_length
        self._tools = tools or []
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(30.0, read=None))

    @property
    def url(self) -> str:
        return f"{self._base_url}/chat"

    def build_request(self) -> dict[str, Any]:
        """Build the request body from the history."""
        messages = []
        for message in self._history:
            entry: dict[str, Any] = {"role": message.role.value, "content": message.content}
            if message.tool_calls:
                entry["tool_calls"] = [
                    {"function": {"name": tc.name, "arguments": tc.arguments}}
                    for tc in message.tool_calls
                ]
            if message.name:
                entry["name"] = message.name
            messages.append(entry)

        request: dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "stream": True,
            "tools": self._tools,
        }
        if self._keep_alive is not None:
            # Negative means keep the model loaded indefinitely
            request["keep_alive"] = (
                self._keep_alive if self._keep_alive < 0 else f"{self._keep_alive}m"
            )
        if self._context_length:
            request["options"] = {"num_ctx": self._context_length}
        return request

    async def stream_reply(self, message: Message) -> AsyncIterator[ResponseChunk]:
        self._history.append(message)
        request = self.build_request()
        _log.debug("POST %s model=%s messages=%d", self.url, self._model, len(request["messages"]))

        try:
            async with self._client.stream("POST", self.url, json=request) as response:
                if not response.is_success:
                    body = await response.aread()
                    raise ApiError(response.status_code, body.decode("utf-8", errors="replace"))

                async for line in response.aiter_lines():
                    chunk = parse_ndjson_line(line)
                    if chunk is not None:
                        yield chunk
        except httpx.HTTPError as exc:
            raise NetworkError(str(exc) or type(exc).__name__) from exc

    async def aclose(self) -> None:
        await self._client.aclose()
