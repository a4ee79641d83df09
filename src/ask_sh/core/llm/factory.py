"""Construct the chat provider selected by configuration."""

from __future__ import annotations

import logging
from typing import Any

from ask_sh.config.schema import LLMConfig
from ask_sh.config.secrets import fetch_secret
from ask_sh.core.llm.anthropic_provider import AnthropicProvider
from ask_sh.core.llm.errors import ConfigError
from ask_sh.core.llm.ollama_provider import OllamaProvider
from ask_sh.core.llm.openai_provider import OpenAIProvider
from ask_sh.core.llm.provider import ChatProvider
from ask_sh.core.llm.providers import PROVIDER_NAMES, PROVIDER_SPECS

_log = logging.getLogger("ask_sh.llm")


def resolve_model(config: LLMConfig) -> str:
    """Return the configured model, or the provider's default."""
    spec = PROVIDER_SPECS.get(config.provider)
    if spec is None:
        raise ConfigError(
            f"Unknown provider {config.provider!r} (expected one of: {', '.join(PROVIDER_NAMES)})"
        )
    return config.model or spec.default_model


def _require_key(env_var: str) -> str:
    key = fetch_secret(env_var)
    if not key:
        raise ConfigError(f"{env_var} is not set")
    return key


def create_provider(
    config: LLMConfig,
    tools: list[dict[str, Any]] | None = None,
) -> ChatProvider:
    """Build a provider from the LLM config.

    Args:
        config: Selected provider, model and endpoint settings.
        tools: Tool schemas to declare. Dropped for providers whose
            ``supports_tools`` is false.

    Raises:
        ConfigError: Unknown provider or missing API key.
    """
    model = resolve_model(config)
    spec = PROVIDER_SPECS[config.provider]
    _log.debug("Using provider=%s model=%s", spec.name, model)

    if tools and not spec.supports_tools:
        _log.debug("Provider %s takes no tool declarations; dropping %d", spec.name, len(tools))
        tools = None

    if spec.name == "openai":
        return OpenAIProvider(
            model,
            api_key=_require_key(spec.api_key_env or ""),
            api_base=config.base_url,
            tools=tools,
            max_tokens=config.max_tokens,
        )

    if spec.name == "anthropic":
        return AnthropicProvider(
            model,
            api_key=_require_key(spec.api_key_env or ""),
            max_tokens=config.max_tokens,
            url=config.base_url or spec.default_base_url,
        )

    if spec.name == "ollama":
        return OllamaProvider(
            model,
            base_url=config.base_url or spec.default_base_url,
            keep_alive=config.keep_alive,
            context_length=config.context_length,
            tools=tools,
        )

    raise ConfigError(f"Provider {spec.name!r} has no client implementation")
