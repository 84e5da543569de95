"""Payout and profitability calculations for outsourced leasing work."""

from typing import Any

from .services.calculation_service import calculate_payout, compute
from .version import get_project_version

__all__ = ["__version__", "calculate_payout", "compute"]


def __getattr__(name: str) -> Any:
    if name == "__version__":
        return get_project_version()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
