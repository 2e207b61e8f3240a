"""Value objects exchanged between the calculators and the service layer.

Calculators receive plain numbers plus a few enumerated selectors and return
the dataclasses defined here. Every instance is created for a single
calculation and is never shared, so the result types are frozen where callers
have no reason to mutate them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ContributorCategory(str, Enum):
    """Social insurance category selecting the contribution amount and basis."""

    STANDARD = "standard"
    PREFERENTIAL = "preferential"
    HEALTH_ONLY = "health_only"
    EMPLOYEE = "employee"


class TaxRegime(str, Enum):
    """Income taxation regime available to the self-employed."""

    SCALE = "scale"
    LINEAR = "linear"
    LUMP_SUM = "lump_sum"


REGIME_PREFERENCE: tuple[TaxRegime, ...] = (
    TaxRegime.SCALE,
    TaxRegime.LINEAR,
    TaxRegime.LUMP_SUM,
)


class Frequency(str, Enum):
    """Contribution and compounding frequencies."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMIANNUAL = "semiannual"
    ANNUAL = "annual"
    DAILY = "daily"

    @property
    def periods_per_year(self) -> int:
        return _PERIODS_PER_YEAR[self]


_PERIODS_PER_YEAR = {
    Frequency.MONTHLY: 12,
    Frequency.QUARTERLY: 4,
    Frequency.SEMIANNUAL: 2,
    Frequency.ANNUAL: 1,
    Frequency.DAILY: 365,
}


class IncomeFrequency(str, Enum):
    """Unit in which a B2B rate is quoted."""

    MONTHLY = "monthly"
    DAILY = "daily"
    HOURLY = "hourly"


@dataclass(frozen=True, slots=True)
class ContributionResult:
    """Monthly social and health insurance amounts."""

    social_contribution: float
    health_contribution: float
    voluntary_sickness_contribution: float = 0.0
    basis: float = 0.0

    @property
    def social_total(self) -> float:
        return self.social_contribution + self.voluntary_sickness_contribution

    @property
    def total(self) -> float:
        return self.social_total + self.health_contribution


@dataclass(frozen=True, slots=True)
class CalculationResult:
    """Gross to net breakdown shared by payroll and business calculations."""

    gross_amount: float
    total_contributions: float
    taxable_base: float
    tax_amount: float
    net_amount: float


@dataclass(frozen=True, slots=True)
class EmployerCost:
    """Employer contributions paid on top of the gross salary."""

    retirement: float
    disability: float
    accident: float
    labour_fund: float
    fgsp: float
    ppk: float
    total_cost: float

    @property
    def contributions(self) -> float:
        return (
            self.retirement
            + self.disability
            + self.accident
            + self.labour_fund
            + self.fgsp
            + self.ppk
        )


@dataclass(frozen=True, slots=True)
class MonthlyPayrollRow:
    """Single month of the cumulative withholding schedule."""

    month: int
    gross_amount: float
    cumulative_taxable_base: float
    tax_amount: float
    net_amount: float


@dataclass(frozen=True, slots=True)
class PayrollResult(CalculationResult):
    """Employment salary breakdown for one month."""

    social_contribution: float = 0.0
    voluntary_sickness_contribution: float = 0.0
    health_contribution: float = 0.0
    cost_of_income: float = 0.0
    ppk_contribution: float = 0.0
    contribution_breakdown: dict[str, float] = field(default_factory=dict)
    employer: EmployerCost | None = None
    monthly_breakdown: tuple[MonthlyPayrollRow, ...] = ()

    @property
    def social_total(self) -> float:
        return self.social_contribution + self.voluntary_sickness_contribution


@dataclass(frozen=True, slots=True)
class InverseResult:
    """Outcome of the net to gross search."""

    gross_amount: float
    iterations: int
    converged: bool
    result: PayrollResult


@dataclass(frozen=True, slots=True)
class RegimeResult(CalculationResult):
    """Net business income under a single taxation regime."""

    regime: TaxRegime = TaxRegime.SCALE
    deductible_costs: float = 0.0
    contributions: ContributionResult | None = None


@dataclass(frozen=True, slots=True)
class RegimeComparison:
    """Net results for every regime plus the most favourable one."""

    monthly_revenue: float
    scale: RegimeResult
    linear: RegimeResult
    lump_sum: RegimeResult
    best: TaxRegime

    def for_regime(self, regime: TaxRegime) -> RegimeResult:
        return {
            TaxRegime.SCALE: self.scale,
            TaxRegime.LINEAR: self.linear,
            TaxRegime.LUMP_SUM: self.lump_sum,
        }[regime]


@dataclass(frozen=True, slots=True)
class InvestmentParams:
    """Inputs for a compound growth projection."""

    initial_amount: float = 0.0
    periodic_contribution: float = 0.0
    contribution_frequency: Frequency = Frequency.MONTHLY
    annual_return_rate: float = 0.0
    compounding_frequency: Frequency = Frequency.ANNUAL
    duration_years: int = 0


@dataclass(frozen=True, slots=True)
class YearlyProjectionRow:
    """Balance split at the end of a projection year."""

    period: int
    cumulative_principal: float
    cumulative_interest: float
    balance: float


@dataclass(frozen=True, slots=True)
class RetirementProjectionRow(YearlyProjectionRow):
    age: int = 0


@dataclass(frozen=True, slots=True)
class ProjectionResult:
    final_balance: float
    total_contributed: float
    total_interest: float
    yearly_data: tuple[YearlyProjectionRow, ...] = ()


@dataclass(frozen=True, slots=True)
class RetirementAccountResult:
    """Projection of an IKE/IKZE account with its tax treatment."""

    account: str
    relief: str
    annual_contribution: float
    contribution_capped: bool
    final_balance: float
    total_contributed: float
    total_interest: float
    profit_percentage: float
    tax_relief: float
    yearly_tax_relief: float
    capital_gains_tax_avoided: float
    monthly_pension: float
    estimated_public_pension: float | None
    payout_age_warning: bool
    yearly_data: tuple[RetirementProjectionRow, ...] = ()


@dataclass(frozen=True, slots=True)
class InvalidInput:
    """Sentinel returned instead of a number when a formula cannot be evaluated."""

    reason: str


PercentageOutcome = float | InvalidInput


__all__ = [
    "CalculationResult",
    "ContributionResult",
    "ContributorCategory",
    "EmployerCost",
    "Frequency",
    "IncomeFrequency",
    "InvalidInput",
    "InverseResult",
    "InvestmentParams",
    "MonthlyPayrollRow",
    "PayrollResult",
    "PercentageOutcome",
    "ProjectionResult",
    "REGIME_PREFERENCE",
    "RegimeComparison",
    "RegimeResult",
    "RetirementAccountResult",
    "RetirementProjectionRow",
    "TaxRegime",
    "YearlyProjectionRow",
]
