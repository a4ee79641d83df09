"""Tool protocol, schema builder and result type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from ask_sh.core.llm.provider import ToolCall


class ToolError(Exception):
    """A tool could not produce a result (e.g. the search backend failed)."""


@dataclass
class ToolCallResult:
    """The outcome of one tool call, as sent back to the model.

    Attributes:
        function_call: The call this result answers.
        content: JSON-serializable payload: output text, error text, or
            structured data such as search results.
    """

    function_call: ToolCall
    content: Any

    def to_dict(self) -> dict[str, Any]:
        return {"function_call": self.function_call.to_dict(), "content": self.content}


def function_schema(
    name: str,
    description: str,
    properties: dict[str, dict[str, Any]],
    required: list[str] | None = None,
) -> dict[str, Any]:
    """Build an OpenAI-style function tool declaration."""
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": required if required is not None else list(properties),
            },
        },
    }


class Tool(Protocol):
    """A callable tool the model can invoke by name."""

    @property
    def name(self) -> str:
        ...

    @property
    def schema(self) -> dict[str, Any]:
        """Declaration sent to the model."""
        ...

    async def run(self, call: ToolCall) -> ToolCallResult:
        """Handle one call. Expected failures become error results."""
        ...

    async def aclose(self) -> None:
        """Release whatever the tool opened during the run."""
        ...
