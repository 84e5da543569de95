"""Policy configuration for payout calculations."""

from .policy import (
    CONFIG_DIRECTORY,
    POLICY_FILE,
    ConfigurationError,
    MarginAssistantConfig,
    PolicyConfiguration,
    TaxConstants,
    assistant_settings,
    load_policy,
    load_policy_file,
    parse_policy,
    tax_constants,
)

__all__ = [
    "CONFIG_DIRECTORY",
    "POLICY_FILE",
    "ConfigurationError",
    "MarginAssistantConfig",
    "PolicyConfiguration",
    "TaxConstants",
    "assistant_settings",
    "load_policy",
    "load_policy_file",
    "parse_policy",
    "tax_constants",
]
