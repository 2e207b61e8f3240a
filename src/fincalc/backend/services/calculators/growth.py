"""Compound growth projection with periodic contributions."""

from __future__ import annotations

from fincalc.backend.app.models import (
    Frequency,
    InvestmentParams,
    ProjectionResult,
    YearlyProjectionRow,
)

from .utils import round_currency


def _projection_row(period: int, principal: float, balance: float) -> YearlyProjectionRow:
    rounded_balance = round_currency(balance)
    rounded_principal = round_currency(principal)
    return YearlyProjectionRow(
        period=period,
        cumulative_principal=rounded_principal,
        cumulative_interest=round_currency(rounded_balance - rounded_principal),
        balance=rounded_balance,
    )


def project(params: InvestmentParams) -> ProjectionResult:
    """Simulate the investment year by year.

    Contributions for a year are spread evenly over its compounding
    sub-periods. Each sub-period first receives its share and then earns
    ``annual_return_rate / periods`` interest, so money paid mid-year only
    compounds for the remainder of the year. The initial amount counts as
    contributed principal.
    """

    contribution_periods = Frequency(params.contribution_frequency).periods_per_year
    compounding_periods = Frequency(params.compounding_frequency).periods_per_year
    period_rate = params.annual_return_rate / compounding_periods

    balance = params.initial_amount
    principal = params.initial_amount
    rows: list[YearlyProjectionRow] = []

    for year in range(1, params.duration_years + 1):
        yearly_contribution = params.periodic_contribution * contribution_periods
        per_period = yearly_contribution / compounding_periods
        for _ in range(compounding_periods):
            balance += per_period
            balance *= 1 + period_rate
        principal += yearly_contribution
        rows.append(_projection_row(year, principal, balance))

    final = _projection_row(params.duration_years, principal, balance)
    return ProjectionResult(
        final_balance=final.balance,
        total_contributed=final.cumulative_principal,
        total_interest=final.cumulative_interest,
        yearly_data=tuple(rows),
    )


__all__ = ["project"]
