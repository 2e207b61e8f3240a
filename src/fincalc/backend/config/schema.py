"""Pydantic models describing the tax year configuration schema."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)
from typing_extensions import Self


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


def _validate_fraction(value: float, label: str) -> None:
    if value < 0 or value > 1:
        raise ConfigurationError(f"{label} must be between 0 and 1")


class TaxBracket(ImmutableModel):
    """Represents a single progressive tax bracket."""

    upper_bound: float | None = Field(default=None, alias="upper")
    rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> TaxBracket:
        if self.rate < 0:
            raise ConfigurationError("Tax rates must be non-negative")
        if self.upper_bound is not None and self.upper_bound <= 0:
            raise ConfigurationError("Upper bounds must be positive values")
        return self


class TaxConfig(ImmutableModel):
    """Income tax tables shared by payroll and business calculators."""

    brackets: Sequence[TaxBracket]
    linear_rate: float
    lump_sum_rates: Sequence[float] = Field(default_factory=tuple)
    months_per_year: int = 12

    @field_validator("lump_sum_rates", mode="before")
    @classmethod
    def _coerce_lump_sum_rates(cls, value: Any) -> Sequence[float]:
        if value is None:
            return ()
        if isinstance(value, Iterable):
            return tuple(float(entry) for entry in value)
        raise ConfigurationError("'lump_sum_rates' must be an iterable of percentages")

    @model_validator(mode="after")
    def _validate_config(self) -> TaxConfig:
        _validate_fraction(self.linear_rate, "Linear tax rate")
        if self.months_per_year <= 0:
            raise ConfigurationError("'months_per_year' must be a positive integer")
        for rate in self.lump_sum_rates:
            if rate < 0 or rate > 100:
                raise ConfigurationError("Lump-sum rates must be percentages between 0 and 100")
        return self


class EmployeeContributionRates(ImmutableModel):
    """Employee social insurance rates applied to gross salary."""

    retirement: float
    disability: float
    sickness: float

    @model_validator(mode="after")
    def _validate_rates(self) -> EmployeeContributionRates:
        for label, rate in (
            ("retirement", self.retirement),
            ("disability", self.disability),
            ("sickness", self.sickness),
        ):
            _validate_fraction(rate, f"Employee {label} rate")
        return self

    @property
    def total(self) -> float:
        return self.retirement + self.disability + self.sickness


class ContributorCategoryConfig(ImmutableModel):
    """Fixed monthly social contribution for a self-employed contributor category."""

    id: str
    monthly_amount: float
    basis: float = 0.0

    @model_validator(mode="after")
    def _validate_amounts(self) -> ContributorCategoryConfig:
        if self.monthly_amount < 0:
            raise ConfigurationError("Category monthly amounts must be non-negative")
        if self.basis < 0:
            raise ConfigurationError("Category contribution basis must be non-negative")
        return self


class HealthTier(ImmutableModel):
    """Flat lump-sum health contribution for an annual revenue band."""

    upper_bound: float | None = Field(default=None, alias="upper")
    amount: float

    @model_validator(mode="after")
    def _validate_tier(self) -> HealthTier:
        if self.amount < 0:
            raise ConfigurationError("Health tier amounts must be non-negative")
        if self.upper_bound is not None and self.upper_bound <= 0:
            raise ConfigurationError("Health tier upper bounds must be positive values")
        return self


class HealthConfig(ImmutableModel):
    """Health insurance rates per taxation regime."""

    minimum: float
    rates: Mapping[str, float]
    lump_sum_tiers: Sequence[HealthTier]

    @field_validator("rates", mode="before")
    @classmethod
    def _coerce_rates(cls, value: Any) -> Mapping[str, float]:
        if isinstance(value, Mapping):
            return {str(key): float(rate) for key, rate in value.items()}
        raise ConfigurationError("Health configuration requires a 'rates' mapping")

    @model_validator(mode="after")
    def _validate_health(self) -> HealthConfig:
        if self.minimum < 0:
            raise ConfigurationError("Health contribution minimum must be non-negative")
        for regime, rate in self.rates.items():
            _validate_fraction(rate, f"Health rate for '{regime}'")
        if not self.lump_sum_tiers:
            raise ConfigurationError("Health configuration requires 'lump_sum_tiers'")
        if self.lump_sum_tiers[-1].upper_bound is not None:
            raise ConfigurationError("Final lump-sum health tier must have an open upper bound")
        return self

    def rate_for(self, regime: str) -> float:
        try:
            return self.rates[regime]
        except KeyError as exc:
            raise ConfigurationError(f"No health rate configured for regime '{regime}'") from exc

    def lump_sum_amount(self, annual_revenue: float) -> float:
        for tier in self.lump_sum_tiers:
            if tier.upper_bound is None or annual_revenue <= tier.upper_bound:
                return tier.amount
        return self.lump_sum_tiers[-1].amount


class ContributionConfig(ImmutableModel):
    """Social and health insurance configuration."""

    voluntary_sickness_rate: float
    employee_rates: EmployeeContributionRates
    categories: Sequence[ContributorCategoryConfig]
    health: HealthConfig

    @model_validator(mode="after")
    def _validate_categories(self) -> ContributionConfig:
        _validate_fraction(self.voluntary_sickness_rate, "Voluntary sickness rate")
        if not self.categories:
            raise ConfigurationError("At least one contributor category must be defined")
        return self

    def get_category(self, category_id: str) -> ContributorCategoryConfig:
        for category in self.categories:
            if category.id == category_id:
                return category
        raise KeyError(category_id)


class CostOfIncomeConfig(ImmutableModel):
    """Monthly flat cost-of-income allowances for employees."""

    local: float
    commuting: float

    @model_validator(mode="after")
    def _validate_amounts(self) -> CostOfIncomeConfig:
        if self.local < 0 or self.commuting < 0:
            raise ConfigurationError("Cost-of-income allowances must be non-negative")
        return self


class PpkConfig(ImmutableModel):
    """Employee capital plan (PPK) contribution rates."""

    employee_rate: float
    employer_rate: float

    @model_validator(mode="after")
    def _validate_rates(self) -> PpkConfig:
        _validate_fraction(self.employee_rate, "PPK employee rate")
        _validate_fraction(self.employer_rate, "PPK employer rate")
        return self


class EmployerContributionRates(ImmutableModel):
    """Employer-side contributions added on top of gross salary."""

    retirement: float
    disability: float
    accident: float
    labour_fund: float
    fgsp: float

    @model_validator(mode="after")
    def _validate_rates(self) -> EmployerContributionRates:
        for label, rate in self.model_dump().items():
            _validate_fraction(rate, f"Employer {label} rate")
        return self


class PayrollConfig(ImmutableModel):
    """Employment specific allowances, credits and employer rates."""

    cost_of_income: CostOfIncomeConfig
    tax_credit_amount: float
    ppk: PpkConfig
    employer_rates: EmployerContributionRates

    @model_validator(mode="after")
    def _validate_payroll(self) -> PayrollConfig:
        if self.tax_credit_amount < 0:
            raise ConfigurationError("Tax credit amount must be non-negative")
        return self


class BusinessConfig(ImmutableModel):
    """Conversion factors for daily and hourly B2B rates."""

    working_days_per_month: int = 22
    hours_per_day: int = 8

    @model_validator(mode="after")
    def _validate_factors(self) -> BusinessConfig:
        if self.working_days_per_month <= 0 or self.hours_per_day <= 0:
            raise ConfigurationError("Working time factors must be positive integers")
        return self


class RetirementAccountConfig(ImmutableModel):
    """Statutory limits and tax treatment of a retirement account."""

    id: str
    annual_limit: float
    relief: str
    relief_rate: float = 0.0
    capital_gains_rate: float = 0.0
    minimum_payout_age: int | None = None

    @model_validator(mode="after")
    def _validate_account(self) -> Self:
        if self.relief not in {"deduction", "exemption"}:
            raise ConfigurationError("Account 'relief' must be one of: deduction, exemption")
        if self.annual_limit <= 0:
            raise ConfigurationError("Account annual limit must be positive")
        _validate_fraction(self.relief_rate, "Account relief rate")
        _validate_fraction(self.capital_gains_rate, "Account capital gains rate")
        return self


class RetirementConfig(ImmutableModel):
    """Retirement account catalogue for a tax year."""

    public_pension_replacement_rate: float = 0.0
    accounts: Sequence[RetirementAccountConfig]

    @model_validator(mode="after")
    def _validate_accounts(self) -> RetirementConfig:
        _validate_fraction(self.public_pension_replacement_rate, "Replacement rate")
        if not self.accounts:
            raise ConfigurationError("At least one retirement account must be defined")
        return self

    def get_account(self, account_id: str) -> RetirementAccountConfig:
        for account in self.accounts:
            if account.id == account_id:
                return account
        raise KeyError(account_id)


class YearConfiguration(ImmutableModel):
    """Structured representation of a tax year configuration."""

    year: int
    meta: Mapping[str, Any] = Field(default_factory=dict)
    tax: TaxConfig
    contributions: ContributionConfig
    payroll: PayrollConfig
    business: BusinessConfig = Field(default_factory=BusinessConfig)
    retirement: RetirementConfig

    @model_validator(mode="before")
    @classmethod
    def _prepare_sections(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration file must define a mapping at the top level")

        prepared = dict(data)
        meta = prepared.get("meta")
        if meta is None:
            prepared["meta"] = {}
        elif not isinstance(meta, Mapping):
            raise ConfigurationError("'meta' section must be a mapping if provided")

        for section in ("tax", "contributions", "payroll", "retirement"):
            if not isinstance(prepared.get(section), Mapping):
                raise ConfigurationError(f"Configuration requires a '{section}' section")

        if prepared.get("business") is None:
            prepared["business"] = {}

        return prepared

    @model_validator(mode="after")
    def _validate_year(self) -> YearConfiguration:
        self._validate_bracket_sequence(self.tax.brackets)
        return self

    @staticmethod
    def _validate_bracket_sequence(brackets: Sequence[TaxBracket]) -> None:
        if not brackets:
            raise ConfigurationError("At least one tax bracket must be defined")
        last_upper: float | None = None
        for bracket in brackets[:-1]:
            upper = bracket.upper_bound
            if upper is None:
                raise ConfigurationError("Only the final tax bracket may be open-ended")
            if last_upper is not None and upper <= last_upper:
                raise ConfigurationError("Tax brackets must be in ascending order")
            last_upper = upper
        if brackets[-1].upper_bound is not None:
            raise ConfigurationError("Final tax bracket must have an open upper bound")


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported tax year in the manifest."""

    year: int
    filename: str | None = None
    status: str = "active"
    notes_url: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available tax year configuration files."""

    years: Sequence[TaxYearManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> TaxYearManifest:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))


__all__ = [
    "BusinessConfig",
    "ConfigurationError",
    "ContributionConfig",
    "ContributorCategoryConfig",
    "CostOfIncomeConfig",
    "EmployeeContributionRates",
    "EmployerContributionRates",
    "HealthConfig",
    "HealthTier",
    "ImmutableModel",
    "PayrollConfig",
    "PpkConfig",
    "RetirementAccountConfig",
    "RetirementConfig",
    "TaxBracket",
    "TaxConfig",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "ValidationError",
    "YearConfiguration",
]
