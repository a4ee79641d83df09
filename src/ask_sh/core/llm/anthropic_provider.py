"""Anthropic Messages API backend.

Streams server-sent events and surfaces only the text of
``content_block_delta`` events. No tools are declared on this backend, so
its replies never carry tool calls.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from ask_sh.core.llm.errors import ApiError, NetworkError
from ask_sh.core.llm.provider import BaseChatProvider, Message, ResponseChunk, Role

_log = logging.getLogger("ask_sh.llm.anthropic")

ANTHROPIC_API_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"


def parse_sse_line(line: str) -> str | None:
    """Extract the text fragment from one SSE line, if it carries one.

    Raises:
        ApiError: If the line is an in-stream ``error`` event.
    """
    if not line or line.startswith(":"):
        return None

    if not line.startswith("data: "):
        return None

    data = line[len("data: "):]
    if data.strip() == "[DONE]":
        return None

    try:
        event = json.loads(data)
    except json.JSONDecodeError:
        _log.debug("Skipping undecodable SSE data: %r", data)
        return None

    if not isinstance(event, dict):
        return None

    if event.get("type") == "error":
        error = event.get("error") or {}
        if isinstance(error, dict):
            raise ApiError(None, str(error.get("message") or error.get("type") or error))
        raise ApiError(None, str(error))

    if event.get("type") != "content_block_delta":
        return None

    delta = event.get("delta") or {}
    text = delta.get("text")
    return text if isinstance(text, str) else None


class AnthropicProvider(BaseChatProvider):
    """Chat provider for the Anthropic Messages API."""

    name = "anthropic"

    def __init__(
        self,
        model: str,
        *,
        api_key: str,
        max_tokens: int = 4096,
        url: str = ANTHROPIC_API_URL,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(model)
        self._api_key = api_key
        self._max_tokens = max_tokens
        self._url = url
        # No read timeout: a reply may take arbitrarily long to finish
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(30.0, read=None))

    def build_request(self) -> dict[str, Any]:
        """Build the request body from the history.

        The system prompt goes into the top-level ``system`` field; the
        Messages API only accepts user and assistant turns.
        """
        system_parts: list[str] = []
        messages: list[dict[str, str]] = []

        for message in self._history:
            if message.role is Role.SYSTEM:
                system_parts.append(message.content)
                continue
            if not message.content:
                continue
            role = "assistant" if message.role is Role.ASSISTANT else "user"
            messages.append({"role": role, "content": message.content})

        request: dict[str, Any] = {
            "model": self._model,
            "messages": messages,
            "stream": True,
            "max_tokens": self._max_tokens,
        }
        if system_parts:
            request["system"] = "\n\n".join(system_parts)
        return request

    def _headers(self) -> dict[str, str]:
        return {
            "content-type": "application/json",
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }

    async def stream_reply(self, message: Message) -> AsyncIterator[ResponseChunk]:
        self._history.append(message)
        request = self.build_request()
        _log.debug("POST %s model=%s messages=%d", self._url, self._model, len(request["messages"]))

        try:
            async with self._client.stream(
                "POST", self._url, json=request, headers=self._headers()
            ) as response:
                if not response.is_success:
                    body = await response.aread()
                    raise ApiError(response.status_code, body.decode("utf-8", errors="replace"))

                async for line in response.aiter_lines():
                    text = parse_sse_line(line)
                    if text:
                        yield ResponseChunk(text=text)
        except httpx.HTTPError as exc:
            raise NetworkError(str(exc) or type(exc).__name__) from exc

    async def aclose(self) -> None:
        await self._client.aclose()
