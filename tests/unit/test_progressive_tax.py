"""Unit coverage for the marginal bracket engine."""

from __future__ import annotations

import pytest

from fincalc.backend.config.year_config import TaxBracket
from fincalc.backend.services.calculators.utils import (
    annual_progressive_tax,
    calculate_progressive_tax,
)

BRACKETS = (
    TaxBracket(upper=30000, rate=0.0),
    TaxBracket(upper=120000, rate=0.12),
    TaxBracket(rate=0.32),
)


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        (-500.0, 0.0),
        (0.0, 0.0),
        (30000.0, 0.0),
        (50000.0, 2400.0),
        (125024.88, 12407.9616),
    ],
)
def test_calculate_progressive_tax(amount: float, expected: float) -> None:
    assert calculate_progressive_tax(amount, BRACKETS) == pytest.approx(expected)


def test_boundary_amount_is_taxed_in_lower_bracket() -> None:
    """An amount equal to a bound never reaches the next marginal rate."""

    assert calculate_progressive_tax(120000.0, BRACKETS) == pytest.approx(10800.0)
    assert calculate_progressive_tax(120001.0, BRACKETS) == pytest.approx(10800.32)


def test_annual_progressive_tax_returns_monthly_share() -> None:
    monthly = annual_progressive_tax(10000.0, BRACKETS, months_per_year=12)

    assert monthly == pytest.approx(900.0)


def test_configured_brackets_match_statutory_scale(config) -> None:
    assert calculate_progressive_tax(216000.0, config.tax.brackets) == pytest.approx(41520.0)
