"""Secret management for ask-sh.

API keys are never read from config files. They come from the process
environment, falling back to a project-local .env file loaded with
python-dotenv and cached.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import dotenv_values

SECRETS_FILE = ".env"


@lru_cache(maxsize=1)
def _load_secrets(secrets_path: Path | None = None) -> dict[str, str | None]:
    """Load and cache the dotenv file."""
    path = secrets_path or Path(SECRETS_FILE)
    if path.exists():
        return dotenv_values(path)
    return {}


def fetch_secret(
    key: str,
    default: str | None = None,
    secrets_path: Path | None = None,
) -> str | None:
    """Fetch a secret from the environment or the .env file.

    The environment wins so tests can use monkeypatch.setenv/delenv.

    Example:
        >>> fetch_secret("ASK_SH_OPENAI_API_KEY")
        'sk-...'
    """
    value = os.environ.get(key)
    if value is not None:
        return value

    secrets = _load_secrets(secrets_path)
    if secrets.get(key) is not None:
        return secrets[key]

    return default


def clear_secret_cache() -> None:
    """Clear the secrets cache (tests, or after the .env file changed)."""
    _load_secrets.cache_clear()
