"""Configuration schema dataclasses for ask-sh.

Defines the structure of configuration at all levels (system, user, project).
All fields have defaults so partial configs merge together cleanly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class LLMConfig:
    """LLM provider configuration.

    API keys are not part of the config; they come from fetch_secret().
    """

    provider: str = "openai"  # "openai", "anthropic" or "ollama"
    model: str | None = None  # None = provider default
    base_url: str | None = None  # Custom endpoint (OpenAI-compatible or Ollama)
    keep_alive: int | None = None  # Minutes to keep the model loaded (Ollama only)
    context_length: int | None = None  # num_ctx (Ollama only)
    max_tokens: int = 4096


@dataclass
class TerminalConfig:
    """tmux session and completion-detection settings.

    Example config.yaml:
        terminal:
          session_name: ask_sh_session
          poll_interval: 0.1
          max_attempts: 300
    """

    session_name: str = "ask_sh_session"
    poll_interval: float = 0.1  # Seconds between pane captures
    max_attempts: int = 100  # Captures before giving up on the marker
    clear_delay: float = 0.1  # Wait after clearing the screen
    prompt_poll_interval: float = 0.01
    prompt_max_attempts: int = 100
    window_width: int = 1000  # Wide enough that output never soft-wraps
    startup_delay: float = 0.2  # Wait after creating a session


@dataclass
class SearchConfig:
    """SearXNG web search settings. No base URL means no web_search tool."""

    searxng_base_url: str | None = None
    engines: str = "google,bing,duckduckgo"
    max_results: int = 5
    timeout: float = 10.0


@dataclass
class ChatConfig:
    """Conversation loop settings."""

    max_turns: int | None = None  # None = no bound on tool-call rounds
    render_markdown: bool = False  # Render replies as Markdown instead of streaming


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # TRACE, DEBUG, INFO, WARNING, ERROR
    file: str | None = None  # Log file path


@dataclass
class Config:
    """Root configuration object.

    Aggregates all configuration sections. All fields use default factories
    to ensure partial configs work correctly with deep merging.
    """

    llm: LLMConfig = field(default_factory=LLMConfig)
    terminal: TerminalConfig = field(default_factory=TerminalConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    chat: ChatConfig = field(default_factory=ChatConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    debug: bool = False

    # Extension point for future config sections
    extra: dict[str, Any] = field(default_factory=dict)
