"""Typed input models and derived results shared across the services.

Inputs are frozen Pydantic models holding the raw text the user typed, so a
saved snapshot restores exactly what was on screen. Derived figures are
lightweight dataclasses rebuilt from those inputs on every recomputation.
"""

from .inputs import (
    AmortizationItem,
    CalculationMode,
    CalculationRequest,
    ManagementInput,
    ModeInputs,
    SavedRecord,
    SublettingInput,
    format_validation_error,
    new_item_id,
)
from .results import (
    CalculationResult,
    ModeFigures,
    ProfitabilityFigures,
    WithholdingBreakdown,
)

__all__ = [
    "AmortizationItem",
    "CalculationMode",
    "CalculationRequest",
    "CalculationResult",
    "ManagementInput",
    "ModeFigures",
    "ModeInputs",
    "ProfitabilityFigures",
    "SavedRecord",
    "SublettingInput",
    "WithholdingBreakdown",
    "format_validation_error",
    "new_item_id",
]
