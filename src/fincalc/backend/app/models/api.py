"""Pydantic models describing the public API surface."""

from __future__ import annotations

from typing import Any, Literal, get_args

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from .domain import ContributorCategory, Frequency, IncomeFrequency, TaxRegime

__all__ = [
    "PayrollRequest",
    "BusinessRequest",
    "InvestmentRequest",
    "RetirementRequest",
    "PercentageRequest",
    "ResponseMeta",
    "ContributionEntry",
    "EmployerCostEntry",
    "MonthlyPayrollEntry",
    "PayrollSummary",
    "PayrollResponse",
    "RegimeEntry",
    "BusinessResponse",
    "ProjectionRowEntry",
    "InvestmentResponse",
    "RetirementResponse",
    "PercentageResponse",
    "format_validation_error",
    "PERCENTAGE_OPERATIONS",
]


PercentageOperation = Literal[
    "part_of_whole",
    "percent_change",
    "add_percent",
    "subtract_percent",
    "ratio_as_percent",
    "discount",
]
PERCENTAGE_OPERATIONS: tuple[str, ...] = get_args(PercentageOperation)

RETIREMENT_FREQUENCIES = (Frequency.MONTHLY, Frequency.ANNUAL)


def _normalise_choice(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


class _RequestModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    year: int | None = Field(default=None, ge=0)


class PayrollRequest(_RequestModel):
    """Employment salary conversion in either direction."""

    mode: Literal["gross", "net"] = "gross"
    amount: float = Field(..., ge=0)
    category: ContributorCategory = ContributorCategory.EMPLOYEE
    over_26: bool = True
    remote_work_allowance: bool = True
    tax_credit_count: int = Field(default=1, ge=0, le=12)
    ppk_opt_in: bool = False
    voluntary_sickness: bool = False
    accident_rate: float | None = Field(default=None, ge=0, le=1)
    include_fgsp: bool = True
    include_employer_cost: bool = True
    include_monthly_breakdown: bool = False
    stable_salary: bool = True

    @field_validator("mode", "category", mode="before")
    @classmethod
    def _normalise_selectors(cls, value: Any) -> Any:
        return _normalise_choice(value)

    @field_validator(
        "over_26",
        "remote_work_allowance",
        "ppk_opt_in",
        "voluntary_sickness",
        "include_fgsp",
        "include_employer_cost",
        "include_monthly_breakdown",
        "stable_salary",
        mode="before",
    )
    @classmethod
    def _normalise_optional_bool(cls, value: Any, info: ValidationInfo) -> bool:
        if value is None:
            return bool(cls.model_fields[info.field_name].default)
        return bool(value)


class BusinessRequest(_RequestModel):
    """Self-employment revenue compared across taxation regimes."""

    revenue: float = Field(..., ge=0)
    revenue_frequency: IncomeFrequency = IncomeFrequency.MONTHLY
    costs: float = Field(default=0.0, ge=0)
    lump_sum_rate: float = Field(default=12.0, ge=0, le=100)
    category: ContributorCategory = ContributorCategory.STANDARD
    voluntary_sickness: bool = False

    @field_validator("revenue_frequency", "category", mode="before")
    @classmethod
    def _normalise_selectors(cls, value: Any) -> Any:
        return _normalise_choice(value)

    @field_validator("category")
    @classmethod
    def _reject_employee_category(cls, value: ContributorCategory) -> ContributorCategory:
        if value is ContributorCategory.EMPLOYEE:
            raise ValueError("employee contributions do not apply to self-employment")
        return value


class InvestmentRequest(BaseModel):
    """Compound growth projection parameters."""

    model_config = ConfigDict(extra="forbid")

    initial_amount: float = Field(default=0.0, ge=0)
    periodic_contribution: float = Field(default=0.0, ge=0)
    contribution_frequency: Frequency = Frequency.MONTHLY
    annual_return_rate: float = Field(..., ge=0, le=1)
    compounding_frequency: Frequency = Frequency.ANNUAL
    duration_years: int = Field(..., ge=0, le=100)

    @field_validator("contribution_frequency", "compounding_frequency", mode="before")
    @classmethod
    def _normalise_frequency(cls, value: Any) -> Any:
        return _normalise_choice(value)

    @field_validator("contribution_frequency")
    @classmethod
    def _reject_daily_contributions(cls, value: Frequency) -> Frequency:
        if value is Frequency.DAILY:
            raise ValueError("contributions cannot be scheduled daily")
        return value


class RetirementRequest(_RequestModel):
    """IKE or IKZE account projection."""

    account: Literal["ike", "ikze"]
    contribution_amount: float = Field(..., ge=0)
    contribution_frequency: Frequency = Frequency.MONTHLY
    current_age: int = Field(..., ge=0, le=120)
    target_age: int = Field(..., ge=0, le=120)
    annual_return_rate: float = Field(..., ge=0, le=1)
    payout_years: int = Field(default=20, ge=0, le=60)
    monthly_salary: float | None = Field(default=None, ge=0)

    @field_validator("account", "contribution_frequency", mode="before")
    @classmethod
    def _normalise_selectors(cls, value: Any) -> Any:
        return _normalise_choice(value)

    @field_validator("contribution_frequency")
    @classmethod
    def _limit_frequency(cls, value: Frequency) -> Frequency:
        if value not in RETIREMENT_FREQUENCIES:
            raise ValueError("contributions must be monthly or annual")
        return value

    @model_validator(mode="after")
    def _check_age_order(self) -> "RetirementRequest":
        if self.target_age < self.current_age:
            raise ValueError("target_age cannot be lower than current_age")
        return self


class PercentageRequest(BaseModel):
    """Operands for a single percentage formula."""

    model_config = ConfigDict(extra="forbid")

    operation: PercentageOperation
    a: float
    b: float

    @field_validator("operation", mode="before")
    @classmethod
    def _normalise_operation(cls, value: Any) -> Any:
        return _normalise_choice(value)


class ResponseMeta(BaseModel):
    """Metadata returned alongside the calculation output."""

    model_config = ConfigDict(extra="forbid")

    year: int
    currency: str


class ContributionEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    social_contribution: float
    health_contribution: float
    voluntary_sickness_contribution: float
    basis: float
    total: float


class EmployerCostEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    retirement: float
    disability: float
    accident: float
    labour_fund: float
    fgsp: float
    ppk: float
    contributions: float
    total_cost: float


class MonthlyPayrollEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    month: int
    gross_amount: float
    cumulative_taxable_base: float
    tax_amount: float
    net_amount: float


class PayrollSummary(BaseModel):
    """Payslip figures for one month."""

    model_config = ConfigDict(extra="forbid")

    gross_amount: float
    social_contribution: float
    voluntary_sickness_contribution: float
    health_contribution: float
    total_contributions: float
    taxable_base: float
    cost_of_income: float
    tax_amount: float
    ppk_contribution: float
    net_amount: float
    contribution_breakdown: dict[str, float] | None = None
    employer: EmployerCostEntry | None = None
    monthly_breakdown: list[MonthlyPayrollEntry] | None = None


class PayrollResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    mode: Literal["gross", "net"]
    summary: PayrollSummary
    iterations: int | None = None
    converged: bool | None = None
    meta: ResponseMeta


class RegimeEntry(BaseModel):
    """Monthly outcome under one taxation regime."""

    model_config = ConfigDict(extra="forbid")

    regime: TaxRegime
    gross_amount: float
    deductible_costs: float
    taxable_base: float
    tax_amount: float
    total_contributions: float
    net_amount: float
    contributions: ContributionEntry


class BusinessResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    monthly_revenue: float
    best: TaxRegime
    regimes: list[RegimeEntry]
    meta: ResponseMeta


class ProjectionRowEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    period: int
    cumulative_principal: float
    cumulative_interest: float
    balance: float
    age: int | None = None


class InvestmentResponse(BaseModel):
    model_config = ConfigDict(extra="forbid")

    final_balance: float
    total_contributed: float
    total_interest: float
    yearly_data: list[ProjectionRowEntry]


class RetirementResponse(BaseModel):
    """Account projection together with its tax effects."""

    model_config = ConfigDict(extra="forbid")

    account: str
    relief: Literal["deduction", "exemption"]
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
    estimated_public_pension: float | None = None
    payout_age_warning: bool
    yearly_data: list[ProjectionRowEntry]
    meta: ResponseMeta


class PercentageResponse(BaseModel):
    """Formula result, or the reason it is undefined."""

    model_config = ConfigDict(extra="forbid")

    operation: str
    a: float
    b: float
    valid: bool
    result: float | None = None
    reason: str | None = None


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages: list[str] = []
    for issue in error.errors():
        location = ".".join(str(part) for part in issue.get("loc", ()))
        message = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in message.lower():
            message = "value cannot be negative"
        if location:
            messages.append(f"{location}: {message}")
        else:
            messages.append(message)

    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"
