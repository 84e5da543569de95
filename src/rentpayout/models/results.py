"""Derived figures produced by the calculators.

Results are plain frozen dataclasses: they are rebuilt from inputs on every
change and never persisted, so they carry no validation logic of their own.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

from .inputs import CalculationMode

_ONE_DECIMAL = Decimal("0.1")


def _json_number(value: Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


@dataclass(frozen=True, slots=True)
class WithholdingBreakdown:
    """Statutory deductions taken from a single outsource fee payment."""

    tax: Decimal
    health: Decimal
    net_pay: Decimal

    @property
    def is_threshold_reached(self) -> bool:
        return self.tax > 0 or self.health > 0


@dataclass(frozen=True, slots=True)
class ModeFigures:
    """Revenue, cost, and fee figures derived from one mode's inputs."""

    gross_revenue: Decimal
    operational_cost: Decimal
    outsource_fee: Decimal
    rent_cost_only: Decimal = Decimal(0)
    amortization_total: Decimal = Decimal(0)


@dataclass(frozen=True, slots=True)
class ProfitabilityFigures:
    real_revenue: Decimal
    profit: Decimal
    margin: Decimal
    is_loss: bool
    is_low_margin: bool


@dataclass(frozen=True, slots=True)
class CalculationResult:
    """Full payout and profitability picture for the active inputs."""

    mode: CalculationMode
    gross_revenue: Decimal
    real_revenue: Decimal
    operational_cost: Decimal
    rent_cost_only: Decimal
    amortization_total: Decimal
    outsource_fee: Decimal
    tax: Decimal
    health: Decimal
    net_pay: Decimal
    profit: Decimal
    margin: Decimal
    is_tax_threshold_reached: bool
    is_low_margin: bool
    is_loss: bool

    @property
    def margin_display(self) -> Decimal:
        """Margin rounded to one decimal place for presentation."""

        with localcontext() as context:
            context.prec = max(context.prec, self.margin.adjusted() + 3)
            return self.margin.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for field in fields(self):
            value = getattr(self, field.name)
            if isinstance(value, CalculationMode):
                payload[field.name] = value.value
            elif isinstance(value, Decimal):
                payload[field.name] = _json_number(value)
            else:
                payload[field.name] = value
        payload["margin"] = float(self.margin)
        payload["margin_display"] = float(self.margin_display)
        return payload


__all__ = [
    "CalculationResult",
    "ModeFigures",
    "ProfitabilityFigures",
    "WithholdingBreakdown",
]
