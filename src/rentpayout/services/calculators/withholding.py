"""Withholding tax and supplementary health premium on agent payments."""

from __future__ import annotations

from decimal import Decimal

from rentpayout.config.schema import TaxConstants
from rentpayout.models import WithholdingBreakdown

from .utils import round_currency

_ZERO = Decimal(0)


def calculate_income_tax(outsource_fee: Decimal, constants: TaxConstants) -> Decimal:
    """Withhold income tax only when the fee strictly exceeds the threshold."""

    if outsource_fee > constants.tax_threshold:
        return round_currency(outsource_fee * constants.tax_rate)
    return _ZERO


def calculate_health_premium(outsource_fee: Decimal, constants: TaxConstants) -> Decimal:
    """Charge the premium from the threshold upwards (inclusive boundary)."""

    if outsource_fee >= constants.health_threshold:
        return round_currency(outsource_fee * constants.health_rate)
    return _ZERO


def calculate_withholding(
    outsource_fee: Decimal, constants: TaxConstants
) -> WithholdingBreakdown:
    """Return the deductions and net remittance for ``outsource_fee``.

    Negative fees are not rejected here; callers validate their inputs.
    """

    tax = calculate_income_tax(outsource_fee, constants)
    health = calculate_health_premium(outsource_fee, constants)
    return WithholdingBreakdown(
        tax=tax,
        health=health,
        net_pay=outsource_fee - tax - health,
    )


__all__ = [
    "calculate_health_premium",
    "calculate_income_tax",
    "calculate_withholding",
]
