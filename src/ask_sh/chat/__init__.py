"""Conversation loop and reply output."""

from ask_sh.chat.orchestrator import ConversationOrchestrator, tool_results_message
from ask_sh.chat.render import ReplyRenderer

__all__ = [
    "ConversationOrchestrator",
    "ReplyRenderer",
    "tool_results_message",
]
