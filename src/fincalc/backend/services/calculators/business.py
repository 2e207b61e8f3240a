"""Self-employment (B2B) taxation regime comparison."""

from __future__ import annotations

from fincalc.backend.app.models import (
    REGIME_PREFERENCE,
    ContributorCategory,
    IncomeFrequency,
    RegimeComparison,
    RegimeResult,
    TaxRegime,
)
from fincalc.backend.config.year_config import BusinessConfig, YearConfiguration

from .contributions import compute_contributions
from .utils import annual_progressive_tax, clamp_non_negative, round_currency


def monthly_revenue_from_rate(
    amount: float, frequency: IncomeFrequency, config: BusinessConfig
) -> float:
    """Convert a daily or hourly rate into monthly revenue."""

    frequency = IncomeFrequency(frequency)
    if frequency is IncomeFrequency.DAILY:
        return amount * config.working_days_per_month
    if frequency is IncomeFrequency.HOURLY:
        return amount * config.hours_per_day * config.working_days_per_month
    return amount


def _regime_result(
    regime: TaxRegime,
    revenue: float,
    costs: float,
    taxable_base: float,
    tax: float,
    category: ContributorCategory,
    voluntary_sickness: bool,
    config: YearConfiguration,
) -> RegimeResult:
    contributions = compute_contributions(
        revenue,
        category,
        regime,
        voluntary_sickness,
        config.contributions,
        config.tax.months_per_year,
    )
    net = revenue - costs - tax - contributions.total
    return RegimeResult(
        gross_amount=round_currency(revenue),
        total_contributions=round_currency(contributions.total),
        taxable_base=round_currency(taxable_base),
        tax_amount=tax,
        net_amount=round_currency(net),
        regime=regime,
        deductible_costs=round_currency(costs),
        contributions=contributions,
    )


def compare_regimes(
    monthly_revenue: float,
    monthly_costs: float,
    lump_sum_rate: float,
    category: ContributorCategory,
    voluntary_sickness: bool,
    config: YearConfiguration,
) -> RegimeComparison:
    """Compute monthly net income under every regime and pick the best one.

    ``lump_sum_rate`` is a percentage of revenue. Costs are deducted under the
    progressive scale and the linear tax only. Contributions are based on
    revenue in every regime. Ties go to the earlier regime in
    ``REGIME_PREFERENCE``.
    """

    category = ContributorCategory(category)
    if category is ContributorCategory.EMPLOYEE:
        raise ValueError("Regime comparison requires a self-employed contributor category")

    revenue = clamp_non_negative(monthly_revenue)
    costs = clamp_non_negative(monthly_costs)
    profit = revenue - costs
    taxable_profit = clamp_non_negative(profit)

    scale_tax = round_currency(
        annual_progressive_tax(taxable_profit, config.tax.brackets, config.tax.months_per_year)
    )
    linear_tax = round_currency(taxable_profit * config.tax.linear_rate)
    lump_sum_tax = round_currency(revenue * (clamp_non_negative(lump_sum_rate) / 100))

    results = {
        TaxRegime.SCALE: _regime_result(
            TaxRegime.SCALE,
            revenue,
            costs,
            taxable_profit,
            scale_tax,
            category,
            voluntary_sickness,
            config,
        ),
        TaxRegime.LINEAR: _regime_result(
            TaxRegime.LINEAR,
            revenue,
            costs,
            taxable_profit,
            linear_tax,
            category,
            voluntary_sickness,
            config,
        ),
        TaxRegime.LUMP_SUM: _regime_result(
            TaxRegime.LUMP_SUM,
            revenue,
            0.0,
            revenue,
            lump_sum_tax,
            category,
            voluntary_sickness,
            config,
        ),
    }

    best = REGIME_PREFERENCE[0]
    for regime in REGIME_PREFERENCE[1:]:
        if results[regime].net_amount > results[best].net_amount:
            best = regime

    return RegimeComparison(
        monthly_revenue=round_currency(revenue),
        scale=results[TaxRegime.SCALE],
        linear=results[TaxRegime.LINEAR],
        lump_sum=results[TaxRegime.LUMP_SUM],
        best=best,
    )


__all__ = ["compare_regimes", "monthly_revenue_from_rate"]
