"""Tax-advantaged retirement accounts (IKE, IKZE) built on the growth projector."""

from __future__ import annotations

from fincalc.backend.app.models import (
    Frequency,
    InvestmentParams,
    RetirementAccountResult,
    RetirementProjectionRow,
)
from fincalc.backend.config.year_config import YearConfiguration

from .growth import project
from .utils import round_currency


def project_retirement_account(
    account_id: str,
    contribution_amount: float,
    contribution_frequency: Frequency,
    current_age: int,
    target_age: int,
    annual_return_rate: float,
    payout_years: int,
    config: YearConfiguration,
    monthly_salary: float | None = None,
) -> RetirementAccountResult:
    """Project an account until ``target_age`` and derive its tax effects.

    Contributions are capped at the account's annual statutory limit and
    compounded annually. Deduction-style accounts return ``relief_rate`` of
    every contribution as tax relief; exemption-style accounts only avoid the
    capital gains tax on the interest earned.
    """

    account = config.retirement.get_account(account_id)
    frequency = Frequency(contribution_frequency)
    periods = frequency.periods_per_year

    requested = max(contribution_amount, 0.0) * periods
    annual_contribution = min(requested, account.annual_limit)
    years = max(target_age - current_age, 0)

    projection = project(
        InvestmentParams(
            initial_amount=0.0,
            periodic_contribution=annual_contribution / periods,
            contribution_frequency=frequency,
            annual_return_rate=annual_return_rate,
            compounding_frequency=Frequency.ANNUAL,
            duration_years=years,
        )
    )

    tax_relief = 0.0
    yearly_tax_relief = 0.0
    if account.relief == "deduction":
        tax_relief = round_currency(projection.total_contributed * account.relief_rate)
        yearly_tax_relief = round_currency(annual_contribution * account.relief_rate)

    profit_percentage = 0.0
    if projection.total_contributed > 0:
        profit_percentage = round_currency(
            projection.total_interest / projection.total_contributed * 100
        )

    monthly_pension = 0.0
    if payout_years > 0:
        monthly_pension = round_currency(projection.final_balance / (payout_years * 12))

    estimated_public_pension = None
    if monthly_salary is not None:
        estimated_public_pension = round_currency(
            monthly_salary * config.retirement.public_pension_replacement_rate
        )

    rows = tuple(
        RetirementProjectionRow(
            period=row.period,
            cumulative_principal=row.cumulative_principal,
            cumulative_interest=row.cumulative_interest,
            balance=row.balance,
            age=current_age + row.period,
        )
        for row in projection.yearly_data
    )

    return RetirementAccountResult(
        account=account.id,
        relief=account.relief,
        annual_contribution=round_currency(annual_contribution),
        contribution_capped=requested > account.annual_limit,
        final_balance=projection.final_balance,
        total_contributed=projection.total_contributed,
        total_interest=projection.total_interest,
        profit_percentage=profit_percentage,
        tax_relief=tax_relief,
        yearly_tax_relief=yearly_tax_relief,
        capital_gains_tax_avoided=round_currency(
            projection.total_interest * account.capital_gains_rate
        ),
        monthly_pension=monthly_pension,
        estimated_public_pension=estimated_public_pension,
        payout_age_warning=(
            account.minimum_payout_age is not None
            and target_age < account.minimum_payout_age
        ),
        yearly_data=rows,
    )


__all__ = ["project_retirement_account"]
