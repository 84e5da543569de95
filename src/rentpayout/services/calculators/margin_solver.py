"""Derive a suggested outsource cost from a target margin, and back again.

The assistant works on the single-cost case: a tax-inclusive revenue figure
and one cost paid to the agent. Two directions are supported:

* dragging the target margin (or clicking a preset) suggests a cost via
  :func:`suggest_cost`;
* typing a cost directly re-derives the implied margin, and the displayed
  target follows it only when the gap exceeds the configured hysteresis band
  (0.5 percentage points by default). Small gaps are left alone so the
  slider does not jump while it is being dragged.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from rentpayout.config.schema import MarginAssistantConfig, TaxConstants

from .utils import floor_currency, parse_amount, quantize_to

_HUNDRED = Decimal(100)
_ONE_DECIMAL = Decimal("0.1")


def suggest_cost(
    revenue: Decimal, target_margin: Decimal, constants: TaxConstants
) -> Decimal | None:
    """Return the largest whole cost that still meets ``target_margin``.

    ``None`` when revenue is not positive. The target is not clamped here.
    """

    if revenue <= 0:
        return None
    revenue_ex_vat = revenue / constants.vat_divisor
    return floor_currency(revenue_ex_vat * (1 - target_margin / _HUNDRED))


def implied_margin(revenue: Decimal, cost: Decimal, constants: TaxConstants) -> Decimal:
    """Margin achieved by ``cost``, on unrounded tax-excluded revenue."""

    revenue_ex_vat = revenue / constants.vat_divisor
    if revenue_ex_vat <= 0:
        return Decimal(0)
    return (revenue_ex_vat - cost) / revenue_ex_vat * _HUNDRED


def clamp_target_margin(value: Decimal, assistant: MarginAssistantConfig) -> Decimal:
    """Clamp to the slider bounds and snap to the nearest step."""

    bounded = min(max(value, assistant.min_target), assistant.max_target)
    steps = ((bounded - assistant.min_target) / assistant.step).quantize(
        Decimal(1), rounding=ROUND_HALF_UP
    )
    snapped = assistant.min_target + steps * assistant.step
    return min(snapped, assistant.max_target)


def reconcile_target_margin(
    revenue: Decimal,
    cost: Decimal,
    current_target: Decimal,
    constants: TaxConstants,
    assistant: MarginAssistantConfig,
) -> Decimal:
    """Return the target to display after ``cost`` was edited directly."""

    if revenue <= 0 or cost < 0:
        return current_target

    margin = implied_margin(revenue, cost, constants)
    if abs(margin - current_target) > assistant.hysteresis:
        return quantize_to(margin, _ONE_DECIMAL, ROUND_HALF_UP)
    return current_target


class MarginAssistant:
    """Holds the displayed target margin for a revenue/cost pair."""

    def __init__(
        self,
        constants: TaxConstants,
        assistant: MarginAssistantConfig,
        *,
        target: Decimal | None = None,
    ) -> None:
        self._constants = constants
        self._settings = assistant
        self.target = assistant.default_target if target is None else target

    @property
    def presets(self) -> tuple[Decimal, ...]:
        return tuple(self._settings.presets)

    def apply_target(self, revenue: Any, target: Any) -> Decimal | None:
        """Set a new target and return the suggested cost for ``revenue``.

        The target is stored even when revenue is missing; the cost is then
        ``None`` and the caller keeps whatever cost it already had.
        """

        parsed_target = parse_amount(target)
        if parsed_target is None:
            raise ValueError(f"Target margin must be numeric, got {target!r}")
        self.target = clamp_target_margin(parsed_target, self._settings)

        parsed_revenue = parse_amount(revenue)
        if parsed_revenue is None:
            return None
        return suggest_cost(parsed_revenue, self.target, self._constants)

    def observe_cost(self, revenue: Any, cost: Any) -> Decimal:
        """Resynchronise the target after a manual edit of revenue or cost."""

        parsed_revenue = parse_amount(revenue)
        parsed_cost = parse_amount(cost)
        if parsed_revenue is None or parsed_cost is None:
            return self.target
        self.target = reconcile_target_margin(
            parsed_revenue,
            parsed_cost,
            self.target,
            self._constants,
            self._settings,
        )
        return self.target


__all__ = [
    "MarginAssistant",
    "clamp_target_margin",
    "implied_margin",
    "reconcile_target_margin",
    "suggest_cost",
]
