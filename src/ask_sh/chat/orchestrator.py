"""The conversation loop: stream a reply, run its tools, repeat."""

from __future__ import annotations

import json

from ask_sh.chat.render import ReplyRenderer
from ask_sh.core.llm.provider import (
    ChatProvider,
    Message,
    ReplyAccumulator,
    Role,
)
from ask_sh.logging import get_logger
from ask_sh.tools.base import ToolCallResult
from ask_sh.tools.dispatcher import ToolDispatcher

log = get_logger("chat")


def tool_results_message(results: list[ToolCallResult]) -> Message:
    """Pack all results of one turn into a single tool message (a JSON array)."""
    payload = json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False)
    return Message(role=Role.TOOL, content=payload)


class ConversationOrchestrator:
    """Drives one run from the user's request to the model's final answer.

    The loop alternates between streaming a reply and dispatching the tool
    calls it carries. It ends on the first reply without tool calls, or
    when ``max_turns`` tool rounds have been run. Provider errors propagate
    to the caller; the tools are closed (terminal session included) however
    the run ends.

    Usage:
        orchestrator = ConversationOrchestrator(provider, dispatcher, renderer)
        await orchestrator.run(system_prompt, user_prompt)
    """

    def __init__(
        self,
        provider: ChatProvider,
        dispatcher: ToolDispatcher,
        renderer: ReplyRenderer,
        *,
        max_turns: int | None = None,
    ) -> None:
        self._provider = provider
        self._dispatcher = dispatcher
        self._renderer = renderer
        self._max_turns = max_turns
        self._tool_rounds = 0

    @property
    def tool_rounds(self) -> int:
        """Number of tool rounds dispatched so far."""
        return self._tool_rounds

    async def run(self, system_prompt: str, user_prompt: str) -> Message:
        """Run the conversation and return the final assistant message.

        Raises:
            LLMError: If talking to the provider fails at any turn.
        """
        self._provider.with_system_prompt(system_prompt)
        message = Message(role=Role.USER, content=user_prompt)

        try:
            while True:
                reply = await self._stream(message)
                if not reply.tool_calls:
                    return reply

                if self._max_turns is not None and self._tool_rounds >= self._max_turns:
                    log.warning(
                        "Stopping after %d tool rounds; %d tool calls left unanswered",
                        self._tool_rounds,
                        len(reply.tool_calls),
                    )
                    return reply

                self._tool_rounds += 1
                log.debug(
                    "Round %d: %s",
                    self._tool_rounds,
                    ", ".join(call.name for call in reply.tool_calls),
                )
                results = await self._dispatcher.dispatch_all(reply.tool_calls)
                message = tool_results_message(results)
        finally:
            await self._dispatcher.aclose()

    async def _stream(self, message: Message) -> Message:
        """Send one message, print the reply as it arrives, record it."""
        accumulator = ReplyAccumulator()
        try:
            async for chunk in self._provider.stream_reply(message):
                self._renderer.write(accumulator.feed(chunk))
        finally:
            self._renderer.finish()

        reply = accumulator.to_message()
        self._provider.history.append(reply)
        return reply
