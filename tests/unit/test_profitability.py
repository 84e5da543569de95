"""Unit coverage for profit and margin analysis."""

from __future__ import annotations

from decimal import Decimal

from rentpayout.services.calculators import analyze_profitability, real_revenue


def test_real_revenue_backs_out_business_tax(constants) -> None:
    assert real_revenue(Decimal("45000"), constants) == 42857
    assert real_revenue(Decimal("4500"), constants) == 4286


def test_profit_and_margin(constants) -> None:
    figures = analyze_profitability(
        Decimal("45000"), Decimal("20000"), Decimal("4500"), constants
    )

    assert figures.real_revenue == 42857
    assert figures.profit == 18357
    assert round(float(figures.margin), 2) == 42.83
    assert not figures.is_loss
    assert not figures.is_low_margin


def test_loss_is_also_low_margin(constants) -> None:
    figures = analyze_profitability(
        Decimal("45000"), Decimal("40000"), Decimal("4500"), constants
    )

    assert figures.profit == -1643
    assert figures.margin < 0
    assert figures.is_loss
    assert figures.is_low_margin


def test_margin_is_zero_without_revenue(constants) -> None:
    figures = analyze_profitability(Decimal("0"), Decimal("0"), Decimal("0"), constants)

    assert figures.real_revenue == 0
    assert figures.margin == 0
    assert not figures.is_loss
    assert figures.is_low_margin


def test_margin_just_below_warning_threshold(constants) -> None:
    # 10500 / 1.05 = 10000; profit 1999 -> 19.99%
    figures = analyze_profitability(
        Decimal("10500"), Decimal("5000"), Decimal("3001"), constants
    )

    assert figures.margin == Decimal("19.99")
    assert figures.is_low_margin


def test_margin_at_warning_threshold_is_not_low(constants) -> None:
    figures = analyze_profitability(
        Decimal("10500"), Decimal("5000"), Decimal("3000"), constants
    )

    assert figures.margin == 20
    assert not figures.is_low_margin
