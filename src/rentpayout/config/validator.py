"""Utilities for validating the policy file and surfacing issues."""

from __future__ import annotations

import argparse
from collections import Counter
from decimal import Decimal
from pathlib import Path
from typing import Sequence

from rentpayout.version import get_project_version

from .policy import POLICY_FILE, load_policy_file
from .schema import ConfigurationError, MarginAssistantConfig, PolicyConfiguration, TaxConstants


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_tax(scope: str, tax: TaxConstants) -> list[str]:
    errors: list[str] = []

    for label, value in {
        "vat_rate": tax.vat_rate,
        "tax_rate": tax.tax_rate,
        "health_rate": tax.health_rate,
    }.items():
        if value == 0:
            errors.append(_format_scope(scope, f"{label} is zero; deductions are disabled"))

    if tax.margin_warning_threshold < 0 or tax.margin_warning_threshold > 100:
        errors.append(
            _format_scope(
                scope,
                f"margin warning threshold {tax.margin_warning_threshold} must be between 0 and 100",
            )
        )

    return errors


def _on_step(value: Decimal, assistant: MarginAssistantConfig) -> bool:
    return ((value - assistant.min_target) % assistant.step) == 0


def _validate_assistant(scope: str, assistant: MarginAssistantConfig) -> list[str]:
    errors: list[str] = []
    lower, upper = assistant.min_target, assistant.max_target

    if not lower <= assistant.default_target <= upper:
        errors.append(
            _format_scope(
                scope,
                f"default target {assistant.default_target} is outside [{lower}, {upper}]",
            )
        )

    presets = list(assistant.presets)
    outside = [value for value in presets if not lower <= value <= upper]
    if outside:
        errors.append(
            _format_scope(scope, f"presets outside [{lower}, {upper}]: {sorted(outside)}")
        )

    duplicates = [value for value, count in Counter(presets).items() if count > 1]
    if duplicates:
        errors.append(
            _format_scope(scope, f"duplicate preset values detected: {sorted(duplicates)}")
        )

    if presets != sorted(presets):
        errors.append(_format_scope(scope, "presets should be sorted"))

    off_step = [value for value in presets if not _on_step(value, assistant)]
    if off_step:
        errors.append(
            _format_scope(
                scope,
                f"presets not aligned to the {assistant.step} step: {sorted(off_step)}",
            )
        )

    return errors


def validate_policy(config: PolicyConfiguration) -> list[str]:
    """Return human-readable issues found in ``config``."""

    errors: list[str] = []
    errors.extend(_validate_tax("tax", config.tax))
    errors.extend(_validate_assistant("assistant", config.assistant))
    return errors


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate the withholding policy file and report issues."
    )
    parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="Policy files to validate (defaults to the packaged policy)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {get_project_version()}",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    paths = args.paths or [POLICY_FILE]

    exit_code = 0

    for path in paths:
        try:
            config = load_policy_file(path)
        except (FileNotFoundError, ConfigurationError) as error:
            print(f"[{path.name}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_policy(config)
        if issues:
            exit_code = 1
            print(f"[{path.name}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{path.name}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
