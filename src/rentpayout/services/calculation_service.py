"""Pure entry points turning a mode and its raw inputs into a result.

``compute`` is the function the UI layer calls after every input change. It
performs no I/O apart from reading the cached policy file, holds no state,
and returns ``None`` while the active inputs are incomplete so callers can
tell "nothing to show yet" apart from a computed zero.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from contextlib import contextmanager
from time import perf_counter
from typing import Any

from pydantic import ValidationError

from rentpayout.config import PolicyConfiguration, load_policy
from rentpayout.models import (
    CalculationMode,
    CalculationRequest,
    CalculationResult,
    ModeInputs,
    format_validation_error,
)

from .calculators import (
    analyze_profitability,
    calculate_mode_figures,
    calculate_withholding,
)

_LOGGER = logging.getLogger(__name__)


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def compute(
    mode: CalculationMode | str,
    inputs: ModeInputs,
    *,
    policy: PolicyConfiguration | None = None,
) -> CalculationResult | None:
    """Return the full result for ``inputs`` or ``None`` when incomplete."""

    mode = CalculationMode(mode)
    constants = (policy or load_policy()).tax
    timings: dict[str, float] | None = {} if _LOGGER.isEnabledFor(logging.DEBUG) else None

    with _profile_section("mode", timings):
        figures = calculate_mode_figures(mode, inputs)
    if figures is None:
        return None

    with _profile_section("withholding", timings):
        withholding = calculate_withholding(figures.outsource_fee, constants)

    with _profile_section("profitability", timings):
        profitability = analyze_profitability(
            figures.gross_revenue,
            figures.operational_cost,
            figures.outsource_fee,
            constants,
        )

    if timings is not None:
        _LOGGER.debug(
            "compute(%s) timings (ms): %s",
            mode.value,
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    return CalculationResult(
        mode=mode,
        gross_revenue=figures.gross_revenue,
        real_revenue=profitability.real_revenue,
        operational_cost=figures.operational_cost,
        rent_cost_only=figures.rent_cost_only,
        amortization_total=figures.amortization_total,
        outsource_fee=figures.outsource_fee,
        tax=withholding.tax,
        health=withholding.health,
        net_pay=withholding.net_pay,
        profit=profitability.profit,
        margin=profitability.margin,
        is_tax_threshold_reached=withholding.is_threshold_reached,
        is_low_margin=profitability.is_low_margin,
        is_loss=profitability.is_loss,
    )


def parse_request(payload: Mapping[str, Any]) -> CalculationRequest:
    """Validate a plain-data request, raising ``ValueError`` on bad shapes."""

    if not isinstance(payload, Mapping):
        raise ValueError("Calculation payload must be an object")
    try:
        return CalculationRequest.model_validate(dict(payload))
    except ValidationError as error:
        raise ValueError(format_validation_error(error)) from error


def calculate_payout(
    payload: Mapping[str, Any],
    *,
    policy: PolicyConfiguration | None = None,
) -> dict[str, Any] | None:
    """Run :func:`compute` for a JSON-style payload and serialise the result."""

    request = parse_request(payload)
    result = compute(request.mode, request.active_inputs, policy=policy)
    if result is None:
        _LOGGER.debug("Inputs for %s mode are incomplete", request.mode.value)
        return None
    return result.to_dict()


__all__ = ["calculate_payout", "compute", "parse_request"]
