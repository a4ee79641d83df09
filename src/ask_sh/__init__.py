"""ask-sh: ask an LLM to get things done in your terminal."""

__version__ = "0.1.0"

# Public API
from ask_sh.chat import ConversationOrchestrator, ReplyRenderer
from ask_sh.config import Config, get_config, load_config
from ask_sh.core.llm import ChatProvider, Message, Role, ToolCall, create_provider
from ask_sh.safety import ApprovalDecision, classify
from ask_sh.terminal import TerminalSession, TmuxMultiplexer
from ask_sh.tools import ToolCallResult, ToolDispatcher, available_tools

__all__ = [
    "__version__",
    # Config
    "Config",
    "get_config",
    "load_config",
    # Providers
    "ChatProvider",
    "Message",
    "Role",
    "ToolCall",
    "create_provider",
    # Safety
    "ApprovalDecision",
    "classify",
    # Terminal
    "TerminalSession",
    "TmuxMultiplexer",
    # Tools and conversation loop
    "ToolCallResult",
    "ToolDispatcher",
    "available_tools",
    "ConversationOrchestrator",
    "ReplyRenderer",
]
