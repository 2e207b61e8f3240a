"""Unit coverage for the self-employment regime comparison."""

from __future__ import annotations

import pytest

from fincalc.backend.app.models import ContributorCategory, IncomeFrequency, TaxRegime
from fincalc.backend.services.calculators.business import (
    compare_regimes,
    monthly_revenue_from_rate,
)


def test_regime_breakdown_for_standard_contributor(config) -> None:
    comparison = compare_regimes(
        20000.0, 2000.0, 12.0, ContributorCategory.STANDARD, False, config
    )

    assert comparison.scale.tax_amount == pytest.approx(3460.0)
    assert comparison.scale.total_contributions == pytest.approx(3218.48)
    assert comparison.scale.net_amount == pytest.approx(11321.52)

    assert comparison.linear.tax_amount == pytest.approx(3420.0)
    assert comparison.linear.contributions.health_contribution == pytest.approx(980.0)
    assert comparison.linear.net_amount == pytest.approx(12181.52)

    assert comparison.lump_sum.deductible_costs == 0.0
    assert comparison.lump_sum.taxable_base == pytest.approx(20000.0)
    assert comparison.lump_sum.tax_amount == pytest.approx(2400.0)
    assert comparison.lump_sum.contributions.health_contribution == pytest.approx(636.51)
    assert comparison.lump_sum.net_amount == pytest.approx(15545.01)

    assert comparison.best is TaxRegime.LUMP_SUM
    assert comparison.for_regime(comparison.best) is comparison.lump_sum


def test_scale_wins_for_small_revenue(config) -> None:
    comparison = compare_regimes(
        3000.0, 0.0, 17.0, ContributorCategory.STANDARD, False, config
    )

    assert comparison.scale.net_amount == pytest.approx(1139.74)
    assert comparison.linear.net_amount == pytest.approx(629.74)
    assert comparison.lump_sum.net_amount == pytest.approx(689.74)
    assert comparison.best is TaxRegime.SCALE


def test_ties_resolve_in_preference_order(config) -> None:
    """Identical nets fall back to scale, then linear, then lump sum."""

    comparison = compare_regimes(
        0.0, 0.0, 12.0, ContributorCategory.HEALTH_ONLY, False, config
    )

    nets = [comparison.for_regime(regime).net_amount for regime in TaxRegime]
    assert nets == [pytest.approx(-381.78)] * 3
    assert comparison.best is TaxRegime.SCALE


def test_losses_are_not_taxed(config) -> None:
    comparison = compare_regimes(
        5000.0, 8000.0, 12.0, ContributorCategory.PREFERENTIAL, False, config
    )

    assert comparison.scale.tax_amount == 0.0
    assert comparison.linear.tax_amount == 0.0
    assert comparison.scale.taxable_base == 0.0


def test_voluntary_sickness_is_added_to_every_regime(config) -> None:
    comparison = compare_regimes(
        10000.0, 0.0, 12.0, ContributorCategory.STANDARD, True, config
    )

    for regime in TaxRegime:
        result = comparison.for_regime(regime)
        assert result.contributions.voluntary_sickness_contribution == pytest.approx(105.35)


def test_employee_category_is_rejected(config) -> None:
    with pytest.raises(ValueError):
        compare_regimes(10000.0, 0.0, 12.0, ContributorCategory.EMPLOYEE, False, config)


@pytest.mark.parametrize(
    ("amount", "frequency", "expected"),
    [
        (15000.0, IncomeFrequency.MONTHLY, 15000.0),
        (1000.0, IncomeFrequency.DAILY, 22000.0),
        (100.0, "hourly", 17600.0),
    ],
)
def test_monthly_revenue_from_rate(
    config, amount: float, frequency: IncomeFrequency, expected: float
) -> None:
    assert monthly_revenue_from_rate(amount, frequency, config.business) == pytest.approx(
        expected
    )
