"""Pydantic models describing the withholding policy configuration."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing_extensions import Self


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


def _coerce_decimal(value: Any) -> Any:
    # Floats go through ``str`` so 0.0211 stays 0.0211 instead of its binary
    # approximation.
    if isinstance(value, float):
        return Decimal(str(value))
    return value


class TaxConstants(ImmutableModel):
    """Statutory rates and thresholds applied to every calculation."""

    vat_rate: Decimal
    tax_threshold: Decimal
    tax_rate: Decimal
    health_threshold: Decimal
    health_rate: Decimal
    margin_warning_threshold: Decimal

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_values(cls, value: Any) -> Any:
        return _coerce_decimal(value)

    @model_validator(mode="after")
    def _validate_values(self) -> Self:
        for name in ("vat_rate", "tax_rate", "health_rate"):
            rate = getattr(self, name)
            if rate < 0 or rate >= 1:
                raise ConfigurationError(f"{name} must be within [0, 1)")
        if self.tax_threshold < 0 or self.health_threshold < 0:
            raise ConfigurationError("Withholding thresholds must be non-negative")
        return self

    @property
    def vat_divisor(self) -> Decimal:
        """Factor that backs the business tax out of a quoted amount."""

        return 1 + self.vat_rate


class MarginAssistantConfig(ImmutableModel):
    """Bounds and presets for the target-margin budget assistant."""

    default_target: Decimal = Decimal("20")
    min_target: Decimal = Decimal("0")
    max_target: Decimal = Decimal("50")
    step: Decimal = Decimal("0.5")
    presets: Sequence[Decimal] = Field(default_factory=tuple)
    hysteresis: Decimal = Decimal("0.5")

    @field_validator(
        "default_target", "min_target", "max_target", "step", "hysteresis", mode="before"
    )
    @classmethod
    def _coerce_values(cls, value: Any) -> Any:
        return _coerce_decimal(value)

    @field_validator("presets", mode="before")
    @classmethod
    def _coerce_presets(cls, value: Any) -> Sequence[Any]:
        if value is None:
            return ()
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            raise ConfigurationError("Assistant presets must be provided as a list")
        return tuple(_coerce_decimal(item) for item in value)

    @model_validator(mode="after")
    def _validate_bounds(self) -> Self:
        if self.min_target > self.max_target:
            raise ConfigurationError("min_target cannot exceed max_target")
        if self.step <= 0:
            raise ConfigurationError("step must be positive")
        if self.hysteresis < 0:
            raise ConfigurationError("hysteresis must be non-negative")
        object.__setattr__(self, "presets", tuple(self.presets))
        return self


class PolicyConfiguration(ImmutableModel):
    """Complete policy file: statutory constants plus assistant settings."""

    tax: TaxConstants
    assistant: MarginAssistantConfig = Field(default_factory=MarginAssistantConfig)
    meta: Mapping[str, Any] = Field(default_factory=dict)


__all__ = [
    "ConfigurationError",
    "ImmutableModel",
    "MarginAssistantConfig",
    "PolicyConfiguration",
    "TaxConstants",
]
