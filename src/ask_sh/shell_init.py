"""Shell integration emitted by ``ask-sh --init``.

Usage (in ~/.bashrc or ~/.zshrc):
    eval "$(ask-sh --init)"
"""

from __future__ import annotations

INIT_SCRIPT = r"""# This function is automatically generated by ask-sh --init
# ask.sh shell function v3
ask() {
    if ! command -v ask-sh > /dev/null 2>&1; then
        printf "❌ ask-sh is installed but cannot be found on your PATH.\n"
        printf "👉 pip usually installs scripts under ~/.local/bin/\n"
        printf "👀 Please add it to your PATH and restart your shell.\n"
        return 1
    fi
    if [ "$#" -eq 0 ]; then
        printf "Usage: ask <what you want to do>\n"
        return 1
    fi
    ask-sh "$@"
}
"""


def init_script() -> str:
    """Return the shell function definition."""
    return INIT_SCRIPT
