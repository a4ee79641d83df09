"""Facts about the user's machine that go into the system prompt."""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass

_OS_NAMES = {"darwin": "macos"}


@dataclass(frozen=True)
class SystemInfo:
    """Operating system, CPU architecture and login shell."""

    os: str
    arch: str
    shell: str

    @classmethod
    def detect(cls) -> SystemInfo:
        system = platform.system().lower() or "unknown"
        return cls(
            os=_OS_NAMES.get(system, system),
            arch=platform.machine() or "unknown",
            shell=detect_shell(),
        )


def detect_shell(env: dict[str, str] | None = None) -> str:
    """Return $SHELL, or guess from BASH_VERSION/ZSH_VERSION."""
    env = os.environ if env is None else env
    shell = env.get("SHELL")
    if shell:
        return shell
    if "BASH_VERSION" in env:
        return "Bash"
    if "ZSH_VERSION" in env:
        return "zsh"
    return "Unknown"
