"""Unit coverage for the compound growth projector."""

from __future__ import annotations

import pytest

from fincalc.backend.app.models import Frequency, InvestmentParams
from fincalc.backend.services.calculators.growth import project


def _params(**overrides) -> InvestmentParams:
    values = {
        "initial_amount": 1000.0,
        "periodic_contribution": 0.0,
        "contribution_frequency": Frequency.MONTHLY,
        "annual_return_rate": 0.10,
        "compounding_frequency": Frequency.ANNUAL,
        "duration_years": 2,
    }
    values.update(overrides)
    return InvestmentParams(**values)


def test_annual_compounding_without_contributions() -> None:
    result = project(_params())

    assert result.final_balance == pytest.approx(1210.0)
    assert result.total_contributed == pytest.approx(1000.0)
    assert result.total_interest == pytest.approx(210.0)
    assert [row.balance for row in result.yearly_data] == [
        pytest.approx(1100.0),
        pytest.approx(1210.0),
    ]


def test_quarterly_compounding() -> None:
    result = project(
        _params(
            annual_return_rate=0.08,
            compounding_frequency=Frequency.QUARTERLY,
            duration_years=1,
        )
    )

    assert result.final_balance == pytest.approx(1082.43)


def test_contributions_accumulate_without_returns() -> None:
    result = project(
        _params(
            initial_amount=500.0,
            periodic_contribution=100.0,
            annual_return_rate=0.0,
            duration_years=3,
        )
    )

    assert [row.cumulative_principal for row in result.yearly_data] == [
        pytest.approx(1700.0),
        pytest.approx(2900.0),
        pytest.approx(4100.0),
    ]
    assert result.total_interest == 0.0


def test_contributions_compound_within_sub_periods() -> None:
    """Money paid during the year earns interest only for the remaining periods."""

    result = project(
        _params(
            initial_amount=0.0,
            periodic_contribution=300.0,
            contribution_frequency=Frequency.QUARTERLY,
            annual_return_rate=0.04,
            compounding_frequency=Frequency.QUARTERLY,
            duration_years=1,
        )
    )

    # 300 * (1.01^4 + 1.01^3 + 1.01^2 + 1.01)
    assert result.final_balance == pytest.approx(1230.30)
    assert result.total_contributed == pytest.approx(1200.0)


def test_balance_identity_holds_for_every_row() -> None:
    result = project(
        _params(
            periodic_contribution=250.0,
            annual_return_rate=0.065,
            compounding_frequency=Frequency.MONTHLY,
            duration_years=25,
        )
    )

    for row in result.yearly_data:
        assert row.balance - row.cumulative_principal == pytest.approx(
            row.cumulative_interest, abs=1e-6
        )
    assert result.final_balance - result.total_contributed == pytest.approx(
        result.total_interest, abs=1e-6
    )
    balances = [row.balance for row in result.yearly_data]
    assert balances == sorted(balances)


def test_zero_duration_returns_initial_amount() -> None:
    result = project(_params(periodic_contribution=100.0, duration_years=0))

    assert result.yearly_data == ()
    assert result.final_balance == pytest.approx(1000.0)
    assert result.total_interest == 0.0
