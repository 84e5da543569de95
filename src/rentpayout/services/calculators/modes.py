"""Mode-specific revenue, cost, and outsource fee derivation."""

from __future__ import annotations

from decimal import Decimal

from rentpayout.models import (
    CalculationMode,
    ManagementInput,
    ModeFigures,
    ModeInputs,
    SublettingInput,
)

from .utils import parse_amount, parse_amount_or_zero, percent_of, round_currency


def amortization_total(inputs: SublettingInput) -> Decimal:
    """Sum the itemised costs; amounts that do not parse count as zero."""

    return sum(
        (parse_amount_or_zero(item.amount) for item in inputs.amortization_items),
        Decimal(0),
    )


def calculate_subletting(inputs: SublettingInput) -> ModeFigures | None:
    rent_cost = parse_amount(inputs.rent_cost)
    total_revenue = parse_amount(inputs.total_revenue)
    outsource_rate = parse_amount(inputs.outsource_rate)
    if rent_cost is None or total_revenue is None or outsource_rate is None:
        return None

    amortization = amortization_total(inputs)
    return ModeFigures(
        gross_revenue=total_revenue,
        operational_cost=rent_cost + amortization,
        outsource_fee=round_currency(percent_of(total_revenue, outsource_rate)),
        rent_cost_only=rent_cost,
        amortization_total=amortization,
    )


def calculate_management(inputs: ManagementInput) -> ModeFigures | None:
    rent_amount = parse_amount(inputs.rent_amount)
    service_fee_rate = parse_amount(inputs.service_fee_rate)
    split_ratio = parse_amount(inputs.split_ratio)
    if rent_amount is None or service_fee_rate is None or split_ratio is None:
        return None

    gross_revenue = round_currency(percent_of(rent_amount, service_fee_rate))
    return ModeFigures(
        gross_revenue=gross_revenue,
        operational_cost=Decimal(0),
        outsource_fee=round_currency(percent_of(gross_revenue, split_ratio)),
    )


def calculate_mode_figures(mode: CalculationMode, inputs: ModeInputs) -> ModeFigures | None:
    """Dispatch to the calculator for ``mode``.

    Returns ``None`` while any required field of the active mode is missing
    or unparseable.
    """

    mode = CalculationMode(mode)
    if mode is CalculationMode.SUBLETTING:
        if not isinstance(inputs, SublettingInput):
            raise TypeError("subletting mode requires SublettingInput")
        return calculate_subletting(inputs)
    if not isinstance(inputs, ManagementInput):
        raise TypeError("management mode requires ManagementInput")
    return calculate_management(inputs)


__all__ = [
    "amortization_total",
    "calculate_management",
    "calculate_mode_figures",
    "calculate_subletting",
]
