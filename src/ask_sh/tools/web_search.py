"""The web_search tool, backed by a SearXNG instance."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

import httpx
from rich.console import Console

from ask_sh.core.llm.provider import ToolCall
from ask_sh.logging import get_logger
from ask_sh.tools.base import ToolCallResult, ToolError, function_schema

log = get_logger("tools.web_search")

WEB_SEARCH = "web_search"
USER_AGENT = "ask-sh-python/0.1.0"


def web_search_schema() -> dict[str, Any]:
    return function_schema(
        WEB_SEARCH,
        "Search the web when the user asks for current information, web lookups, "
        "or information not available locally",
        {"query": {"type": "string", "description": "The search query to run on the search engine."}},
    )


@dataclass
class SearchResult:
    """One search hit as handed to the model."""

    title: str
    url: str
    content: str
    img_src: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class SearxngClient:
    """Minimal client for the SearXNG JSON search API."""

    def __init__(
        self,
        base_url: str,
        *,
        engines: str = "google,bing,duckduckgo",
        max_results: int = 5,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._engines = engines
        self._max_results = max_results
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def url(self) -> str:
        return f"{self._base_url}/search"

    async def search(self, query: str) -> list[SearchResult]:
        """Run a query and return the top results.

        Raises:
            ToolError: On transport failure, error status or a bad body.
        """
        params = {"q": query, "format": "json", "engines": self._engines}
        try:
            response = await self._client.get(
                self.url, params=params, headers={"User-Agent": USER_AGENT}
            )
        except httpx.HTTPError as e:
            raise ToolError(f"SearXNG request failed: {e}") from e

        if not response.is_success:
            raise ToolError(f"SearXNG API error: {response.status_code}: {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise ToolError(f"SearXNG returned invalid JSON: {e}") from e

        results = []
        for raw in (data.get("results") or [])[: self._max_results]:
            results.append(
                SearchResult(
                    title=raw.get("title", ""),
                    url=raw.get("url", ""),
                    content=raw.get("content", ""),
                    img_src=raw.get("img_src"),
                )
            )
        return results

    async def aclose(self) -> None:
        await self._client.aclose()


class WebSearchTool:
    """Looks things up on the web for the model."""

    name = WEB_SEARCH

    def __init__(self, client: SearxngClient, console: Console) -> None:
        self._client = client
        self._console = console

    @property
    def schema(self) -> dict[str, Any]:
        return web_search_schema()

    async def run(self, call: ToolCall) -> ToolCallResult:
        query = call.arguments.get("query")
        if not isinstance(query, str) or not query.strip():
            return ToolCallResult(call, "Error: web_search requires a non-empty 'query' argument")

        self._console.print(f"🔍 Searching with SearXNG: '{query}'", markup=False)
        try:
            results = await self._client.search(query)
        except ToolError as e:
            log.warning("%s", e)
            return ToolCallResult(call, f"Error: {e}")

        self._console.print(f"✅ Processing {len(results)} search results", markup=False)
        self._console.print()
        return ToolCallResult(call, [r.to_dict() for r in results])

    async def aclose(self) -> None:
        await self._client.aclose()
