"""Configuration management for ask-sh.

Provides hierarchical YAML-based configuration with:
- System-level config (/etc/ask-sh/)
- User-level config (~/.config/ask-sh/ or ~/.ask-sh/)
- Project-level config ($project_root/.ask-sh/)
- Environment variable overrides (highest priority)

Example usage:
    from ask_sh.config import load_config

    config = load_config()
    print(config.llm.provider)
    print(config.terminal.session_name)
"""

from ask_sh.config.loader import (
    get_config,
    load_config,
    parse_flag,
    reset_config,
)
from ask_sh.config.paths import (
    get_config_paths,
    get_project_config_path,
    get_system_config_path,
    get_user_config_path,
)
from ask_sh.config.schema import (
    ChatConfig,
    Config,
    LLMConfig,
    LoggingConfig,
    SearchConfig,
    TerminalConfig,
)
from ask_sh.config.secrets import (
    clear_secret_cache,
    fetch_secret,
)

__all__ = [
    # Main API
    "Config",
    "load_config",
    "get_config",
    "reset_config",
    "parse_flag",
    # Schema types
    "LLMConfig",
    "TerminalConfig",
    "SearchConfig",
    "ChatConfig",
    "LoggingConfig",
    # Secret management
    "fetch_secret",
    "clear_secret_cache",
    # Path utilities
    "get_config_paths",
    "get_system_config_path",
    "get_user_config_path",
    "get_project_config_path",
]
