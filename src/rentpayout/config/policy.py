"""Configuration loader wrapping the shared schema models."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .schema import (
    ConfigurationError,
    MarginAssistantConfig,
    PolicyConfiguration,
    TaxConstants,
)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
POLICY_FILE = CONFIG_DIRECTORY / "policy.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


def parse_policy(raw_policy: dict[str, Any]) -> PolicyConfiguration:
    """Validate an already-parsed policy mapping."""

    try:
        return PolicyConfiguration.model_validate(raw_policy)
    except ValidationError as error:
        raise ConfigurationError(f"Policy validation failed: {error}") from error


def load_policy_file(path: Path) -> PolicyConfiguration:
    """Load a policy file from an arbitrary location without caching."""

    if not path.exists():
        raise FileNotFoundError(f"Policy file not found: {path}")
    return parse_policy(_load_yaml(path))


@lru_cache(maxsize=1)
def load_policy() -> PolicyConfiguration:
    """Load and cache the packaged policy configuration."""

    return load_policy_file(POLICY_FILE)


def tax_constants() -> TaxConstants:
    """Shortcut for the statutory constants of the packaged policy."""

    return load_policy().tax


def assistant_settings() -> MarginAssistantConfig:
    return load_policy().assistant


__all__ = [
    "CONFIG_DIRECTORY",
    "ConfigurationError",
    "MarginAssistantConfig",
    "POLICY_FILE",
    "PolicyConfiguration",
    "TaxConstants",
    "assistant_settings",
    "load_policy",
    "load_policy_file",
    "parse_policy",
    "tax_constants",
]
