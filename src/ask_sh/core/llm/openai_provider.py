"""OpenAI-style chat-completions backend.

Talks to OpenAI or any OpenAI-compatible endpoint through litellm's async
streaming completion. Tool calls arrive as deltas spread over many chunks
and are stitched together by their index; the finished list is emitted once
as the last chunk of the stream.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import litellm
import openai

from ask_sh.core.llm.errors import (
    ApiError,
    InvalidRequestError,
    LLMError,
    NetworkError,
)
from ask_sh.core.llm.provider import (
    BaseChatProvider,
    Message,
    ResponseChunk,
    Role,
    ToolCall,
)

_log = logging.getLogger("ask_sh.llm.openai")

_CONNECTION_ERRORS = (litellm.APIConnectionError, litellm.Timeout)
_REQUEST_ERRORS = (litellm.BadRequestError,)
# Every litellm exception derives from the openai client errors
_LITELLM_ERRORS = (openai.OpenAIError,)


def translate_error(exc: Exception) -> LLMError:
    """Map a litellm exception onto the provider error taxonomy.

    Anything that is neither a connection nor a request error becomes an
    ApiError carrying the HTTP status when the exception has one.
    """
    if isinstance(exc, _CONNECTION_ERRORS):
        return NetworkError(str(exc))
    if isinstance(exc, _REQUEST_ERRORS):
        return InvalidRequestError(str(exc))
    return ApiError(getattr(exc, "status_code", None), str(exc))


class OpenAIProvider(BaseChatProvider):
    """Chat provider for OpenAI-compatible APIs.

    Usage:
        provider = OpenAIProvider("gpt-4o-mini", api_key="sk-...")

        # Local OpenAI-compatible server
        provider = OpenAIProvider("qwen2.5", api_key="x", api_base="http://localhost:8000/v1")
    """

    name = "openai"

    def __init__(
        self,
        model: str,
        *,
        api_key: str,
        api_base: str | None = None,
        tools: list[dict[str, Any]] | None = None,
        max_tokens: int = 4096,
        **kwargs: Any,
    ) -> None:
        super().__init__(model)
        self._api_key = api_key
        self._api_base = api_base
        self._tools = tools or []
        self._max_tokens = max_tokens
        self._kwargs = kwargs

    def _build_kwargs(self) -> dict[str, Any]:
        """Build kwargs for the litellm call."""
        kwargs: dict[str, Any] = {
            "model": self._model,
            "custom_llm_provider": "openai",
            "messages": self.wire_messages(),
            "max_tokens": self._max_tokens,
            "stream": True,
            "api_key": self._api_key,
            **self._kwargs,
        }
        if self._api_base:
            kwargs["api_base"] = self._api_base
        if self._tools:
            kwargs["tools"] = self._tools
        return kwargs

    def wire_messages(self) -> list[dict[str, Any]]:
        """Render the history in chat-completions format.

        A tool-role message holds the JSON array of all results of one turn.
        The API wants one message per call id, so the array is split and
        paired by position with the ids of the preceding assistant message.
        """
        wire: list[dict[str, Any]] = []
        call_ids: list[str] = []

        for message in self._history:
            if message.role is Role.ASSISTANT and message.tool_calls:
                call_ids = [
                    tc.id or f"call_{i}" for i, tc in enumerate(message.tool_calls)
                ]
                wire.append({
                    "role": "assistant",
                    "content": message.content,
                    "tool_calls": [
                        {
                            "id": call_id,
                            "type": "function",
                            "function": {
                                "name": tc.name,
                                "arguments": json.dumps(tc.arguments),
                            },
                        }
                        for call_id, tc in zip(call_ids, message.tool_calls)
                    ],
                })
            elif message.role is Role.TOOL:
                wire.extend(_split_tool_message(message, call_ids))
                call_ids = []
            else:
                entry: dict[str, Any] = {"role": message.role.value, "content": message.content}
                if message.name:
                    entry["name"] = message.name
                wire.append(entry)

        return wire

    async def stream_reply(self, message: Message) -> AsyncIterator[ResponseChunk]:
        self._history.append(message)
        kwargs = self._build_kwargs()
        _log.debug("POST chat/completions model=%s messages=%d", self._model, len(kwargs["messages"]))

        try:
            response = await litellm.acompletion(**kwargs)
        except _LITELLM_ERRORS as exc:
            raise translate_error(exc) from exc

        pending: dict[int, dict[str, Any]] = {}
        try:
            async for chunk in response:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta
                if delta is None:
                    continue
                for tool_delta in getattr(delta, "tool_calls", None) or []:
                    _merge_tool_delta(pending, tool_delta)
                text = delta.content or ""
                if text:
                    yield ResponseChunk(text=text)
        except _LITELLM_ERRORS as exc:
            raise translate_error(exc) from exc

        if pending:
            yield ResponseChunk(tool_calls=finish_tool_calls(pending))


def _merge_tool_delta(pending: dict[int, dict[str, Any]], tool_delta: Any) -> None:
    index = getattr(tool_delta, "index", None) or 0
    slot = pending.setdefault(index, {"id": None, "name": "", "arguments": ""})

    if getattr(tool_delta, "id", None):
        slot["id"] = tool_delta.id

    function = getattr(tool_delta, "function", None)
    if function is None:
        return
    if getattr(function, "name", None):
        slot["name"] = function.name
    if getattr(function, "arguments", None):
        slot["arguments"] += function.arguments


def finish_tool_calls(pending: dict[int, dict[str, Any]]) -> tuple[ToolCall, ...]:
    """Turn accumulated tool-call deltas into ToolCalls, ordered by index."""
    calls = []
    for index in sorted(pending):
        slot = pending[index]
        raw = slot["arguments"]
        try:
            arguments = json.loads(raw) if raw else {}
        except json.JSONDecodeError:
            _log.warning("Tool call %r has malformed arguments: %r", slot["name"], raw)
            arguments = {}
        if not isinstance(arguments, dict):
            arguments = {}
        calls.append(ToolCall(name=slot["name"], arguments=arguments, id=slot["id"]))
    return tuple(calls)


def _split_tool_message(message: Message, call_ids: list[str]) -> list[dict[str, Any]]:
    try:
        results = json.loads(message.content)
    except json.JSONDecodeError:
        results = None

    if call_ids and isinstance(results, list) and len(results) == len(call_ids):
        return [
            {"role": "tool", "tool_call_id": call_id, "content": json.dumps(result)}
            for call_id, result in zip(call_ids, results)
        ]

    entry: dict[str, Any] = {"role": "tool", "content": message.content}
    if call_ids:
        entry["tool_call_id"] = call_ids[0]
    return [entry]
