"""Domain-specific calculation helpers."""

from .margin_solver import (
    MarginAssistant,
    clamp_target_margin,
    implied_margin,
    reconcile_target_margin,
    suggest_cost,
)
from .modes import (
    amortization_total,
    calculate_management,
    calculate_mode_figures,
    calculate_subletting,
)
from .profitability import analyze_profitability, margin_percent, real_revenue
from .utils import (
    floor_currency,
    format_percentage,
    parse_amount,
    parse_amount_or_zero,
    percent_of,
    round_currency,
)
from .withholding import (
    calculate_health_premium,
    calculate_income_tax,
    calculate_withholding,
)

__all__ = [
    "MarginAssistant",
    "amortization_total",
    "analyze_profitability",
    "calculate_health_premium",
    "calculate_income_tax",
    "calculate_management",
    "calculate_mode_figures",
    "calculate_subletting",
    "calculate_withholding",
    "clamp_target_margin",
    "floor_currency",
    "format_percentage",
    "implied_margin",
    "margin_percent",
    "parse_amount",
    "parse_amount_or_zero",
    "percent_of",
    "real_revenue",
    "reconcile_target_margin",
    "round_currency",
    "suggest_cost",
]
