"""Chat backend definitions.

Loads per-provider defaults (credential variable, model, endpoint) from
providers.yaml.
"""

from __future__ import annotations

import importlib.resources
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import yaml


@dataclass
class ProviderSpec:
    """Static description of one chat backend."""

    name: str
    default_model: str
    api_key_env: str | None = None
    default_base_url: str | None = None
    supports_tools: bool = True


@lru_cache(maxsize=1)
def _load_providers_yaml() -> dict[str, Any]:
    """Load providers.yaml from package resources."""
    files = importlib.resources.files("ask_sh.core.llm")
    yaml_path = files.joinpath("providers.yaml")
    with importlib.resources.as_file(yaml_path) as path:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)


def _build_provider_specs() -> dict[str, ProviderSpec]:
    data = _load_providers_yaml()
    specs: dict[str, ProviderSpec] = {}

    for provider_name, provider_data in data.get("providers", {}).items():
        specs[provider_name] = ProviderSpec(
            name=provider_name,
            default_model=provider_data["default_model"],
            api_key_env=provider_data.get("api_key_env"),
            default_base_url=provider_data.get("default_base_url"),
            supports_tools=provider_data.get("supports_tools", True),
        )

    return specs


PROVIDER_SPECS: dict[str, ProviderSpec] = _build_provider_specs()
PROVIDER_NAMES: list[str] = list(PROVIDER_SPECS.keys())
