"""Configuration path resolution.

Handles config file locations for:
- System: /etc/ask-sh/config.yaml
- User: $XDG_CONFIG_HOME/ask-sh/, ~/.config/ask-sh/ or ~/.ask-sh/
- Project: $project_root/.ask-sh/config.yaml
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "config.yaml"
APP_NAME = "ask-sh"
SHORT_NAME = ".ask-sh"


def get_system_config_path() -> Path:
    """Get system-level config path. The file may not exist."""
    return Path("/etc") / APP_NAME / CONFIG_FILENAME


def get_user_config_path() -> Path:
    """Get user-level config path. The file may not exist."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_NAME / CONFIG_FILENAME

    home = Path.home()

    # Prefer ~/.config/ask-sh if ~/.config exists
    xdg_default = home / ".config"
    if xdg_default.exists():
        return xdg_default / APP_NAME / CONFIG_FILENAME

    return home / SHORT_NAME / CONFIG_FILENAME


def get_project_config_path(project_root: str) -> Path:
    """Get project-level config path (may not exist)."""
    return Path(project_root) / SHORT_NAME / CONFIG_FILENAME


def get_config_paths(project_root: str | None = None) -> list[Path]:
    """Get all config paths in priority order (lowest to highest).

    Args:
        project_root: Optional directory for project-level config.

    Returns:
        List of config paths in order: system, user, project.
        Later paths override earlier ones when merging.
    """
    paths = [get_system_config_path(), get_user_config_path()]
    if project_root:
        paths.append(get_project_config_path(project_root))
    return paths
