#!/usr/bin/env python3
"""Collect baseline timings for the payout calculation core."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from time import perf_counter

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from rentpayout.services.calculation_service import calculate_payout  # noqa: E402

SAMPLE_PAYLOADS = {
    "subletting": {
        "mode": "subletting",
        "subletting": {
            "rentCost": "20000",
            "totalRevenue": "45000",
            "outsourceRate": "10",
            "amortizationItems": [
                {"label": "Furniture", "amount": "1500"},
                {"label": "Cleaning", "amount": "800"},
            ],
        },
    },
    "management": {
        "mode": "management",
        "management": {"rentAmount": "30000", "serviceFeeRate": "15", "splitRatio": "50"},
    },
}


def measure(payload: dict[str, object], iterations: int) -> dict[str, float]:
    """Return timing statistics for repeated calculations of ``payload``."""

    calculate_payout(payload)  # Warm the policy cache
    start = perf_counter()
    for _ in range(iterations):
        calculate_payout(payload)
    elapsed = perf_counter() - start
    return {
        "iterations": iterations,
        "total_ms": elapsed * 1000,
        "average_ms": (elapsed / iterations) * 1000,
    }


def main() -> None:
    iterations = int(os.getenv("RENTPAYOUT_PROFILE_ITERATIONS", "500"))
    report = {name: measure(payload, iterations) for name, payload in SAMPLE_PAYLOADS.items()}
    print(json.dumps(report, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
