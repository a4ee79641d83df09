"""Root pytest configuration for all tests."""

from __future__ import annotations

import pytest

from ask_sh.config import clear_secret_cache, reset_config

# Configure pytest-asyncio to use auto mode
# This is redundant with pyproject.toml but ensures it's set
pytest_plugins = ("pytest_asyncio",)

_ASK_SH_ENV = (
    "ASK_SH_LLM_PROVIDER",
    "ASK_SH_OPENAI_API_KEY",
    "ASK_SH_OPENAI_MODEL",
    "ASK_SH_OPENAI_BASE_URL",
    "ASK_SH_ANTHROPIC_API_KEY",
    "ASK_SH_ANTHROPIC_MODEL",
    "ASK_SH_OLLAMA_MODEL",
    "ASK_SH_OLLAMA_BASE_URL",
    "ASK_SH_OLLAMA_KEEP_ALIVE",
    "ASK_SH_OLLAMA_CONTEXT_LENGTH",
    "ASK_SH_SEARXNG_BASE_URL",
    "ASK_SH_DEBUG",
    "ASK_SH_LOG",
    "ASK_SH_MAX_TURNS",
    "SYSTEM_PROMPT",
    "USER_PROMPT",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep the developer's environment, config files and .env out of tests."""
    for key in _ASK_SH_ENV:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
    reset_config()
    clear_secret_cache()
    yield
    reset_config()
    clear_secret_cache()
