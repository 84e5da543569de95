from decimal import Decimal
from pathlib import Path

from rentpayout.config import load_policy
from rentpayout.config.validator import main, validate_policy


def _with_assistant(**updates):
    config = load_policy()
    assistant = config.assistant.model_copy(update=updates)
    return config.model_copy(update={"assistant": assistant})


def test_packaged_policy_is_valid() -> None:
    assert validate_policy(load_policy()) == []


def test_validator_flags_presets_outside_bounds() -> None:
    broken = _with_assistant(presets=(15, 20, 75))

    errors = validate_policy(broken)

    assert any("presets outside" in error for error in errors)


def test_validator_flags_unsorted_and_off_step_presets() -> None:
    broken = _with_assistant(presets=(Decimal("30"), Decimal("12.3")))

    errors = validate_policy(broken)

    assert any("sorted" in error for error in errors)
    assert any("step" in error for error in errors)


def test_validator_flags_zero_rates() -> None:
    config = load_policy()
    tax = config.tax.model_copy(update={"health_rate": 0})

    errors = validate_policy(config.model_copy(update={"tax": tax}))

    assert errors == ["tax: health_rate is zero; deductions are disabled"]


def test_cli_reports_success(capsys) -> None:
    assert main([]) == 0
    assert "OK" in capsys.readouterr().out


def test_cli_reports_missing_files(tmp_path: Path, capsys) -> None:
    assert main([str(tmp_path / "absent.yaml")]) == 1
    assert "failed to load configuration" in capsys.readouterr().out
