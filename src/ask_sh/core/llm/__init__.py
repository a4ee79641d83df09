"""Streaming chat providers."""

from ask_sh.core.llm.anthropic_provider import AnthropicProvider
from ask_sh.core.llm.errors import (
    ApiError,
    ConfigError,
    InvalidRequestError,
    LLMError,
    NetworkError,
)
from ask_sh.core.llm.factory import create_provider, resolve_model
from ask_sh.core.llm.ollama_provider import OllamaProvider
from ask_sh.core.llm.openai_provider import OpenAIProvider
from ask_sh.core.llm.provider import (
    BaseChatProvider,
    ChatProvider,
    ConversationHistory,
    Message,
    ReplyAccumulator,
    ResponseChunk,
    Role,
    ToolCall,
)
from ask_sh.core.llm.providers import PROVIDER_NAMES, PROVIDER_SPECS, ProviderSpec

__all__ = [
    # Protocol and conversation types
    "ChatProvider",
    "BaseChatProvider",
    "ConversationHistory",
    "Message",
    "ReplyAccumulator",
    "ResponseChunk",
    "Role",
    "ToolCall",
    # Implementations
    "OpenAIProvider",
    "AnthropicProvider",
    "OllamaProvider",
    "create_provider",
    "resolve_model",
    # Errors
    "LLMError",
    "ConfigError",
    "NetworkError",
    "InvalidRequestError",
    "ApiError",
    # Provider definitions
    "ProviderSpec",
    "PROVIDER_SPECS",
    "PROVIDER_NAMES",
]
