"""Prompt templates.

Templates are markdown files in this package, rendered with
``str.format_map``. The SYSTEM_PROMPT and USER_PROMPT environment variables
replace the packaged templates wholesale.
"""

from __future__ import annotations

import os
from importlib.resources import files
from typing import Any

_PROMPTS_PKG = files("ask_sh.prompts")

SYSTEM_PROMPT_ENV = "SYSTEM_PROMPT"
USER_PROMPT_ENV = "USER_PROMPT"


class _KeepMissing(dict):
    """Leaves unknown ``{placeholders}`` as they are."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def load_prompt(name: str) -> str:
    """Load a prompt template by name (without .md extension)."""
    return _PROMPTS_PKG.joinpath(f"{name}.md").read_text(encoding="utf-8")


def list_prompts() -> list[str]:
    """List available prompt names."""
    return [
        f.name[:-3]  # Remove .md extension
        for f in _PROMPTS_PKG.iterdir()
        if f.name.endswith(".md")
    ]


def render(template: str, **values: Any) -> str:
    """Fill ``{name}`` placeholders; unknown ones and stray braces survive."""
    try:
        return template.format_map(_KeepMissing(values))
    except (ValueError, IndexError):
        # Braces that are not placeholders (shell snippets in an override)
        result = template
        for key, value in values.items():
            result = result.replace("{" + key + "}", str(value))
        return result


def system_prompt(user_os: str, user_arch: str, user_shell: str) -> str:
    """Render the system prompt for this machine."""
    template = os.environ.get(SYSTEM_PROMPT_ENV) or load_prompt("system")
    return render(template, user_os=user_os, user_arch=user_arch, user_shell=user_shell).strip()


def user_prompt(user_input: str) -> str:
    """Wrap the user's request."""
    template = os.environ.get(USER_PROMPT_ENV) or load_prompt("user")
    return render(template, user_input=user_input).strip()


__all__ = [
    "load_prompt",
    "list_prompts",
    "render",
    "system_prompt",
    "user_prompt",
]
