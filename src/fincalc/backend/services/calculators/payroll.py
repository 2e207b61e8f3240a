"""Employment salary calculator (umowa o pracę).

``gross_to_net`` follows the payroll pipeline stage by stage: employee social
contributions, the rounded tax base, the health contribution computed from
that base, the monthly income tax advance and the optional PPK contribution.
Each stage is rounded to grosze where it would appear on a payslip.

``net_to_gross`` has no closed form because both the tax advance and the
health contribution depend on gross in a piecewise way, so it runs a bounded
fixed-point search over ``gross_to_net``, falling back to bisection when the
proportional update stops closing in on the target.
"""

from __future__ import annotations

import logging
import math

from fincalc.backend.app.models import (
    ContributorCategory,
    EmployerCost,
    InverseResult,
    MonthlyPayrollRow,
    PayrollResult,
    TaxRegime,
)
from fincalc.backend.config.year_config import YearConfiguration

from .contributions import (
    employee_contribution_breakdown,
    health_contribution,
    social_contributions,
)
from .utils import (
    annual_progressive_tax,
    calculate_progressive_tax,
    clamp_non_negative,
    round_currency,
)

_LOGGER = logging.getLogger(__name__)

INITIAL_GROSS_FACTOR = 1.4
MAX_ITERATIONS = 100
NET_TOLERANCE = 0.01
DECLINING_SALARY_STEP = 0.005


def _cost_of_income(remote_work_allowance: bool, config: YearConfiguration) -> float:
    allowances = config.payroll.cost_of_income
    return allowances.local if remote_work_allowance else allowances.commuting


def _monthly_tax(
    taxable_base: float,
    cost_of_income: float,
    over_26: bool,
    tax_credit_count: int,
    config: YearConfiguration,
) -> float:
    if not over_26:
        return 0.0

    base_after_costs = clamp_non_negative(taxable_base - cost_of_income)
    tax = annual_progressive_tax(
        base_after_costs, config.tax.brackets, config.tax.months_per_year
    )
    credit = max(tax_credit_count, 0) * config.payroll.tax_credit_amount
    return round_currency(clamp_non_negative(tax - credit))


def _employer_cost(
    gross: float,
    ppk_opt_in: bool,
    accident_rate: float | None,
    include_fgsp: bool,
    config: YearConfiguration,
) -> EmployerCost:
    rates = config.payroll.employer_rates
    accident = rates.accident if accident_rate is None else accident_rate

    retirement = round_currency(gross * rates.retirement)
    disability = round_currency(gross * rates.disability)
    accident_amount = round_currency(gross * accident)
    labour_fund = round_currency(gross * rates.labour_fund)
    fgsp = round_currency(gross * rates.fgsp) if include_fgsp else 0.0
    ppk = round_currency(gross * config.payroll.ppk.employer_rate) if ppk_opt_in else 0.0

    total = gross + retirement + disability + accident_amount + labour_fund + fgsp + ppk
    return EmployerCost(
        retirement=retirement,
        disability=disability,
        accident=accident_amount,
        labour_fund=labour_fund,
        fgsp=fgsp,
        ppk=ppk,
        total_cost=round_currency(total),
    )


def _payslip_deductions(
    gross: float,
    category: ContributorCategory,
    voluntary_sickness: bool,
    ppk_opt_in: bool,
    config: YearConfiguration,
) -> tuple[float, float, float, float, float]:
    """Return ``(social, voluntary_sickness, taxable_base, health, ppk)``."""

    contributions = config.contributions
    social, voluntary, _ = social_contributions(
        gross, category, voluntary_sickness, contributions
    )
    social_total = round_currency(social + voluntary)

    taxable_base = round_currency(clamp_non_negative(gross - social_total))
    health = health_contribution(
        taxable_base, TaxRegime.SCALE, contributions, config.tax.months_per_year
    )
    ppk = round_currency(gross * config.payroll.ppk.employee_rate) if ppk_opt_in else 0.0
    return social, voluntary, taxable_base, health, ppk


def _monthly_breakdown(
    gross: float,
    category: ContributorCategory,
    voluntary_sickness: bool,
    ppk_opt_in: bool,
    cost_of_income: float,
    over_26: bool,
    tax_credit_count: int,
    stable_salary: bool,
    config: YearConfiguration,
) -> tuple[MonthlyPayrollRow, ...]:
    """Withholding schedule for one tax year.

    Each advance is the tax due on the cumulative base under the annual table,
    less the credits accrued so far, minus what earlier months withheld. For a
    stable salary the advances add up to twelve monthly ``tax_amount`` figures.
    With ``stable_salary`` off each month's gross drops by another 0.5% of the
    first month's.
    """

    brackets = config.tax.brackets
    credit = max(tax_credit_count, 0) * config.payroll.tax_credit_amount

    rows: list[MonthlyPayrollRow] = []
    cumulative = 0.0
    withheld = 0.0
    for month in range(1, config.tax.months_per_year + 1):
        monthly_gross = gross
        if not stable_salary:
            monthly_gross = gross * (1 - DECLINING_SALARY_STEP * (month - 1))
        social, voluntary, taxable_base, health, ppk = _payslip_deductions(
            monthly_gross, category, voluntary_sickness, ppk_opt_in, config
        )
        cumulative += clamp_non_negative(taxable_base - cost_of_income)

        tax = 0.0
        if over_26:
            due = calculate_progressive_tax(cumulative, brackets) - credit * month
            tax = round_currency(clamp_non_negative(round_currency(due) - withheld))
            withheld += tax

        net = monthly_gross - social - voluntary - health - tax - ppk
        rows.append(
            MonthlyPayrollRow(
                month=month,
                gross_amount=round_currency(monthly_gross),
                cumulative_taxable_base=round_currency(cumulative),
                tax_amount=tax,
                net_amount=round_currency(net),
            )
        )
    return tuple(rows)


def gross_to_net(
    gross: float,
    category: ContributorCategory,
    over_26: bool,
    remote_work_allowance: bool,
    tax_credit_count: int,
    ppk_opt_in: bool,
    config: YearConfiguration,
    *,
    voluntary_sickness: bool = False,
    accident_rate: float | None = None,
    include_fgsp: bool = True,
    include_employer_cost: bool = False,
    include_monthly_breakdown: bool = False,
    stable_salary: bool = True,
) -> PayrollResult:
    """Convert a monthly gross salary into its net amount."""

    category = ContributorCategory(category)
    gross = clamp_non_negative(gross)

    social, voluntary, taxable_base, health, ppk = _payslip_deductions(
        gross, category, voluntary_sickness, ppk_opt_in, config
    )
    breakdown: dict[str, float] = {}
    if category is ContributorCategory.EMPLOYEE:
        breakdown = employee_contribution_breakdown(gross, config.contributions)
    social_total = round_currency(social + voluntary)

    cost_of_income = _cost_of_income(remote_work_allowance, config)
    tax = _monthly_tax(taxable_base, cost_of_income, over_26, tax_credit_count, config)

    net = gross - social_total - health - tax - ppk

    employer = None
    if include_employer_cost:
        employer = _employer_cost(gross, ppk_opt_in, accident_rate, include_fgsp, config)

    monthly: tuple[MonthlyPayrollRow, ...] = ()
    if include_monthly_breakdown:
        monthly = _monthly_breakdown(
            gross,
            category,
            voluntary_sickness,
            ppk_opt_in,
            cost_of_income,
            over_26,
            tax_credit_count,
            stable_salary,
            config,
        )

    return PayrollResult(
        gross_amount=round_currency(gross),
        total_contributions=round_currency(social_total + health),
        taxable_base=taxable_base,
        tax_amount=tax,
        net_amount=round_currency(net),
        social_contribution=social,
        voluntary_sickness_contribution=voluntary,
        health_contribution=health,
        cost_of_income=cost_of_income if over_26 else 0.0,
        ppk_contribution=ppk,
        contribution_breakdown=breakdown,
        employer=employer,
        monthly_breakdown=monthly,
    )


def _unrounded_net(result: PayrollResult, gross: float) -> float:
    return (
        gross
        - result.social_total
        - result.health_contribution
        - result.tax_amount
        - result.ppk_contribution
    )


def net_to_gross(
    net: float,
    category: ContributorCategory,
    over_26: bool,
    remote_work_allowance: bool,
    tax_credit_count: int,
    ppk_opt_in: bool,
    config: YearConfiguration,
    *,
    voluntary_sickness: bool = False,
    accident_rate: float | None = None,
    include_fgsp: bool = True,
    include_employer_cost: bool = False,
    include_monthly_breakdown: bool = False,
    stable_salary: bool = True,
    max_iterations: int = MAX_ITERATIONS,
) -> InverseResult:
    """Find the gross salary whose net amount matches ``net``.

    Iterates ``guess <- guess * net / net(guess)`` from ``net * 1.4`` until the
    net of the guess is within one grosz of the target or ``max_iterations``
    adjustments were made. Where fixed contributions outweigh the net amount
    that update overshoots, so any step that leaves the bracket of guesses seen
    so far or fails to shrink the error is replaced by bisection. The closest guess is returned either way; failing
    to converge is reported through ``converged`` rather than raised.
    """

    def _evaluate(gross: float, detailed: bool = False) -> PayrollResult:
        return gross_to_net(
            gross,
            category,
            over_26,
            remote_work_allowance,
            tax_credit_count,
            ppk_opt_in,
            config,
            voluntary_sickness=voluntary_sickness,
            accident_rate=accident_rate,
            include_fgsp=include_fgsp,
            include_employer_cost=detailed and include_employer_cost,
            include_monthly_breakdown=detailed and include_monthly_breakdown,
            stable_salary=stable_salary,
        )

    if net <= 0:
        return InverseResult(
            gross_amount=0.0, iterations=0, converged=True, result=_evaluate(0.0, detailed=True)
        )

    guess = net * INITIAL_GROSS_FACTOR
    best_guess = guess
    best_difference = math.inf
    previous_difference = math.inf
    # Net pay never decreases with gross, so every evaluation narrows [low, high].
    low, high = 0.0, math.inf
    iterations = 0
    converged = False

    while True:
        calculated = _unrounded_net(_evaluate(guess), guess)
        difference = abs(calculated - net)
        if difference < best_difference:
            best_guess, best_difference = guess, difference
        if difference < NET_TOLERANCE:
            converged = True
            break
        if iterations >= max_iterations:
            break

        iterations += 1
        if calculated < net:
            low = max(low, guess)
        else:
            high = min(high, guess)

        if calculated <= 0:
            step = guess * 2
        else:
            step = guess * net / calculated
        if difference >= previous_difference or not low < step < high:
            step = guess * 2 if math.isinf(high) else (low + high) / 2
        previous_difference = difference
        guess = step

    if converged:
        _LOGGER.debug("net_to_gross converged after %d iteration(s)", iterations)
    else:
        _LOGGER.warning(
            "net_to_gross did not converge for net=%.2f after %d iterations; "
            "returning closest gross %.2f (difference %.4f)",
            net,
            iterations,
            best_guess,
            best_difference,
        )

    gross = round_currency(best_guess)
    return InverseResult(
        gross_amount=gross,
        iterations=iterations,
        converged=converged,
        result=_evaluate(gross, detailed=True),
    )


__all__ = ["gross_to_net", "net_to_gross"]
