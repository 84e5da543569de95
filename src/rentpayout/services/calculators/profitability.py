"""Profit and margin analysis on tax-excluded revenue."""

from __future__ import annotations

from decimal import Decimal

from rentpayout.config.schema import TaxConstants
from rentpayout.models import ProfitabilityFigures

from .utils import round_currency

_HUNDRED = Decimal(100)


def real_revenue(gross_revenue: Decimal, constants: TaxConstants) -> Decimal:
    """Back the business tax out of ``gross_revenue``."""

    return round_currency(gross_revenue / constants.vat_divisor)


def margin_percent(profit: Decimal, revenue: Decimal) -> Decimal:
    if revenue > 0:
        return profit / revenue * _HUNDRED
    return Decimal(0)


def analyze_profitability(
    gross_revenue: Decimal,
    operational_cost: Decimal,
    outsource_fee: Decimal,
    constants: TaxConstants,
) -> ProfitabilityFigures:
    revenue = real_revenue(gross_revenue, constants)
    profit = revenue - operational_cost - outsource_fee
    margin = margin_percent(profit, revenue)
    return ProfitabilityFigures(
        real_revenue=revenue,
        profit=profit,
        margin=margin,
        is_loss=profit < 0,
        is_low_margin=margin < constants.margin_warning_threshold,
    )


__all__ = ["analyze_profitability", "margin_percent", "real_revenue"]
