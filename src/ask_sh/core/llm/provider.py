"""Chat provider protocol and conversation types."""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class Role(Enum):
    """Message role in a conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(frozen=True, slots=True)
class ToolCall:
    """A function call requested by the model.

    Attributes:
        name: Name of the tool to invoke (e.g. "execute_command").
        arguments: Decoded JSON arguments.
        id: Provider-assigned call id when the wire format has one.
    """

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "arguments": self.arguments}


@dataclass(frozen=True, slots=True)
class Message:
    """A message in the conversation. Never changed once appended."""

    role: Role
    content: str
    tool_calls: tuple[ToolCall, ...] = ()
    name: str | None = None


@dataclass(slots=True)
class ResponseChunk:
    """One piece of a streamed reply: a text fragment and/or tool calls."""

    text: str = ""
    tool_calls: tuple[ToolCall, ...] = ()


class ConversationHistory:
    """Append-only list of messages, system prompt first.

    Owned by one provider for the whole run; nothing is ever removed.
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []

    def append(self, message: Message) -> None:
        if message.role is Role.SYSTEM and self._messages:
            raise ValueError("system message must be the first message")
        self._messages.append(message)

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    @property
    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    def __len__(self) -> int:
        return len(self._messages)


class ReplyAccumulator:
    """Rebuilds the assistant message from a drained stream.

    Text fragments are concatenated in delivery order; tool calls are
    collected from whichever chunks carry them.
    """

    def __init__(self) -> None:
        self._parts: list[str] = []
        self._tool_calls: list[ToolCall] = []

    def feed(self, chunk: ResponseChunk) -> str:
        """Add a chunk and return its text fragment."""
        if chunk.text:
            self._parts.append(chunk.text)
        self._tool_calls.extend(chunk.tool_calls)
        return chunk.text

    @property
    def content(self) -> str:
        return "".join(self._parts)

    @property
    def tool_calls(self) -> tuple[ToolCall, ...]:
        return tuple(self._tool_calls)

    def to_message(self) -> Message:
        return Message(
            role=Role.ASSISTANT,
            content=self.content,
            tool_calls=self.tool_calls,
        )


@runtime_checkable
class ChatProvider(Protocol):
    """Protocol for chat backends.

    A provider owns the conversation history. ``stream_reply`` appends the
    outgoing message before sending; the caller appends the reconstructed
    assistant message once the stream is drained.
    """

    @property
    def name(self) -> str:
        """Backend name ("openai", "anthropic", "ollama")."""
        ...

    @property
    def model(self) -> str:
        """The model identifier being used."""
        ...

    @property
    def history(self) -> ConversationHistory:
        """The conversation so far."""
        ...

    def with_system_prompt(self, prompt: str) -> None:
        """Seed the history with the system prompt."""
        ...

    def stream_reply(self, message: Message) -> AsyncIterator[ResponseChunk]:
        """Send ``message`` with the full history and stream the reply.

        Raises:
            LLMError subclasses on configuration, transport or API failures.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...


class BaseChatProvider:
    """History bookkeeping shared by the concrete providers."""

    name = "base"

    def __init__(self, model: str) -> None:
        self._model = model
        self._history = ConversationHistory()

    @property
    def model(self) -> str:
        return self._model

    @property
    def history(self) -> ConversationHistory:
        return self._history

    def with_system_prompt(self, prompt: str) -> None:
        self._history.append(Message(role=Role.SYSTEM, content=prompt))

    async def aclose(self) -> None:
        return None
