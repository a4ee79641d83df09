"""Configuration file loading and caching.

Handles:
- YAML file parsing
- Environment variable overrides (ASK_SH_*)
- Config caching with reset support
- Conversion from dict to typed Config dataclass
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from ask_sh.config.merge import merge_configs
from ask_sh.config.paths import get_config_paths
from ask_sh.config.schema import (
    ChatConfig,
    Config,
    LLMConfig,
    LoggingConfig,
    SearchConfig,
    TerminalConfig,
)

# Module logger (may not be configured yet at import time)
_log = logging.getLogger("ask_sh.config")

ENV_PREFIX = "ASK_SH_"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})

# Global cached config
_cached_config: Config | None = None


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found or invalid."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except PermissionError:
        _log.debug("Permission denied reading %s", path)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}


def parse_flag(value: str | None) -> bool:
    """Interpret an environment flag such as ASK_SH_DEBUG."""
    return value is not None and value.strip().lower() in _TRUE_VALUES


def _env_int(key: str) -> int | None:
    raw = os.environ.get(key)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        _log.warning("Ignoring %s=%r: not an integer", key, raw)
        return None


def env_overrides(provider: str) -> dict[str, Any]:
    """Build config dict from environment variables.

    Model and endpoint variables are per provider
    (ASK_SH_OPENAI_MODEL, ASK_SH_OLLAMA_BASE_URL, ...), so only the ones
    belonging to the selected provider are read.
    API keys are NOT loaded here - use fetch_secret() for secrets.

    Args:
        provider: The provider already selected by files or ASK_SH_LLM_PROVIDER.

    Returns:
        Config dict with values from environment.
    """
    env = os.environ
    tag = f"{ENV_PREFIX}{provider.upper()}_"

    llm: dict[str, Any] = {
        "provider": env.get(f"{ENV_PREFIX}LLM_PROVIDER"),
        "model": env.get(f"{tag}MODEL"),
        "base_url": env.get(f"{tag}BASE_URL"),
    }
    if provider == "ollama":
        llm["keep_alive"] = _env_int(f"{tag}KEEP_ALIVE")
        llm["context_length"] = _env_int(f"{tag}CONTEXT_LENGTH")

    overrides: dict[str, Any] = {
        "llm": llm,
        "search": {"searxng_base_url": env.get(f"{ENV_PREFIX}SEARXNG_BASE_URL")},
        "chat": {"max_turns": _env_int(f"{ENV_PREFIX}MAX_TURNS")},
        "logging": {"file": env.get(f"{ENV_PREFIX}LOG")},
    }
    if parse_flag(env.get(f"{ENV_PREFIX}DEBUG")):
        overrides["debug"] = True

    return overrides


def dict_to_config(data: dict[str, Any]) -> Config:
    """Convert merged dict to typed Config dataclass.

    Args:
        data: Merged configuration dictionary.

    Returns:
        Typed Config object.
    """
    llm_data = data.get("llm") or {}
    llm_defaults = LLMConfig()
    llm = LLMConfig(
        provider=str(llm_data.get("provider") or llm_defaults.provider).lower(),
        model=llm_data.get("model"),
        base_url=llm_data.get("base_url"),
        keep_alive=llm_data.get("keep_alive"),
        context_length=llm_data.get("context_length"),
        max_tokens=llm_data.get("max_tokens", llm_defaults.max_tokens),
    )

    term_data = data.get("terminal") or {}
    term_defaults = TerminalConfig()
    terminal = TerminalConfig(
        session_name=term_data.get("session_name", term_defaults.session_name),
        poll_interval=term_data.get("poll_interval", term_defaults.poll_interval),
        max_attempts=term_data.get("max_attempts", term_defaults.max_attempts),
        clear_delay=term_data.get("clear_delay", term_defaults.clear_delay),
        prompt_poll_interval=term_data.get(
            "prompt_poll_interval", term_defaults.prompt_poll_interval
        ),
        prompt_max_attempts=term_data.get(
            "prompt_max_attempts", term_defaults.prompt_max_attempts
        ),
        window_width=term_data.get("window_width", term_defaults.window_width),
        startup_delay=term_data.get("startup_delay", term_defaults.startup_delay),
    )

    search_data = data.get("search") or {}
    search_defaults = SearchConfig()
    search = SearchConfig(
        searxng_base_url=search_data.get("searxng_base_url"),
        engines=search_data.get("engines", search_defaults.engines),
        max_results=search_data.get("max_results", search_defaults.max_results),
        timeout=search_data.get("timeout", search_defaults.timeout),
    )

    chat_data = data.get("chat") or {}
    chat = ChatConfig(
        max_turns=chat_data.get("max_turns"),
        render_markdown=bool(chat_data.get("render_markdown", False)),
    )

    log_data = data.get("logging") or {}
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        file=log_data.get("file"),
    )

    known_keys = {"llm", "terminal", "search", "chat", "logging", "debug"}
    extra = {k: v for k, v in data.items() if k not in known_keys}

    return Config(
        llm=llm,
        terminal=terminal,
        search=search,
        chat=chat,
        logging=logging_config,
        debug=bool(data.get("debug", False)),
        extra=extra,
    )


def load_config(project_root: str | None = None, reload: bool = False) -> Config:
    """Load and merge config from all sources.

    Priority order (highest to lowest):
    1. Environment variables (ASK_SH_*)
    2. Project config ($project_root/.ask-sh/config.yaml)
    3. User config (~/.config/ask-sh/config.yaml)
    4. System config (/etc/ask-sh/config.yaml)

    Args:
        project_root: Directory for project-level config.
        reload: Force reload even if cached.

    Returns:
        Merged Config object.
    """
    global _cached_config

    if _cached_config is not None and not reload and project_root is None:
        return _cached_config

    configs: list[dict[str, Any]] = []

    for path in get_config_paths(project_root):
        config_data = load_yaml_file(path)
        if config_data:
            _log.debug("Loaded config from %s", path)
            configs.append(config_data)

    file_config = merge_configs(*configs)

    # The provider decides which per-provider env vars apply
    provider = (
        os.environ.get(f"{ENV_PREFIX}LLM_PROVIDER")
        or (file_config.get("llm") or {}).get("provider")
        or LLMConfig().provider
    )
    merged = merge_configs(file_config, env_overrides(str(provider).lower()))

    config = dict_to_config(merged)

    # Cache only global config (no project_root)
    if project_root is None:
        _cached_config = config

    return config


def get_config() -> Config:
    """Get the cached global config, loading it if needed."""
    if _cached_config is None:
        return load_config()
    return _cached_config


def reset_config() -> None:
    """Reset cached config. Useful for testing or forcing a reload."""
    global _cached_config
    _cached_config = None
