"""Social and health insurance contributions (ZUS)."""

from __future__ import annotations

from fincalc.backend.app.models import ContributionResult, ContributorCategory, TaxRegime
from fincalc.backend.config.year_config import ContributionConfig

from .utils import clamp_non_negative, round_currency


def employee_contribution_breakdown(
    gross: float, config: ContributionConfig
) -> dict[str, float]:
    """Return the rate-based employee social contributions for ``gross``."""

    rates = config.employee_rates
    return {
        "retirement": round_currency(gross * rates.retirement),
        "disability": round_currency(gross * rates.disability),
        "sickness": round_currency(gross * rates.sickness),
    }


def social_contributions(
    base: float,
    category: ContributorCategory,
    voluntary_sickness: bool,
    config: ContributionConfig,
) -> tuple[float, float, float]:
    """Return ``(social, voluntary_sickness, basis)`` for ``category``.

    Self-employed categories pay a fixed monthly amount and may opt into
    sickness insurance on their declared basis. Employees pay a percentage of
    ``base`` and have no voluntary basis.
    """

    category = ContributorCategory(category)
    if category is ContributorCategory.EMPLOYEE:
        social = sum(employee_contribution_breakdown(base, config).values())
        return round_currency(social), 0.0, 0.0

    category_config = config.get_category(category.value)
    basis = category_config.basis
    voluntary = 0.0
    if voluntary_sickness and basis > 0:
        voluntary = round_currency(basis * config.voluntary_sickness_rate)
    return category_config.monthly_amount, voluntary, basis


def health_contribution(
    base: float,
    regime: TaxRegime,
    config: ContributionConfig,
    months_per_year: int = 12,
) -> float:
    """Return the monthly health contribution for ``base`` under ``regime``.

    Lump-sum taxpayers pay a flat amount selected by annualised revenue; the
    other regimes pay a percentage of ``base``. The statutory minimum applies
    in every case.
    """

    regime = TaxRegime(regime)
    health = config.health
    base = clamp_non_negative(base)
    if regime is TaxRegime.LUMP_SUM:
        amount = health.lump_sum_amount(base * months_per_year)
    else:
        amount = base * health.rate_for(regime.value)
    return round_currency(max(amount, health.minimum))


def compute_contributions(
    base: float,
    category: ContributorCategory,
    regime: TaxRegime,
    voluntary_sickness: bool,
    config: ContributionConfig,
    months_per_year: int = 12,
) -> ContributionResult:
    """Compute mandatory contributions where one ``base`` drives every component."""

    social, voluntary, basis = social_contributions(base, category, voluntary_sickness, config)
    health = health_contribution(base, regime, config, months_per_year)
    return ContributionResult(
        social_contribution=social,
        health_contribution=health,
        voluntary_sickness_contribution=voluntary,
        basis=basis,
    )


__all__ = [
    "compute_contributions",
    "employee_contribution_breakdown",
    "health_contribution",
    "social_contributions",
]
