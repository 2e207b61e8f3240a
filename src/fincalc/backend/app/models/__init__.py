"""Typed models shared across the calculators, services and routes.

Calculators exchange the plain dataclasses from :mod:`.domain`; the HTTP layer
validates inputs and serialises outputs through the Pydantic models in
:mod:`.api`. Keeping both here lets routes, services and calculators agree on
one vocabulary of categories, regimes and frequencies.
"""

from __future__ import annotations

from .api import (
    PERCENTAGE_OPERATIONS,
    BusinessRequest,
    BusinessResponse,
    ContributionEntry,
    EmployerCostEntry,
    InvestmentRequest,
    InvestmentResponse,
    MonthlyPayrollEntry,
    PayrollRequest,
    PayrollResponse,
    PayrollSummary,
    PercentageRequest,
    PercentageResponse,
    ProjectionRowEntry,
    RegimeEntry,
    ResponseMeta,
    RetirementRequest,
    RetirementResponse,
    format_validation_error,
)
from .domain import (
    REGIME_PREFERENCE,
    CalculationResult,
    ContributionResult,
    ContributorCategory,
    EmployerCost,
    Frequency,
    IncomeFrequency,
    InvalidInput,
    InverseResult,
    InvestmentParams,
    MonthlyPayrollRow,
    PayrollResult,
    PercentageOutcome,
    ProjectionResult,
    RegimeComparison,
    RegimeResult,
    RetirementAccountResult,
    RetirementProjectionRow,
    TaxRegime,
    YearlyProjectionRow,
)

__all__ = [
    "BusinessRequest",
    "BusinessResponse",
    "CalculationResult",
    "ContributionEntry",
    "ContributionResult",
    "ContributorCategory",
    "EmployerCost",
    "EmployerCostEntry",
    "Frequency",
    "IncomeFrequency",
    "InvalidInput",
    "InverseResult",
    "InvestmentParams",
    "InvestmentRequest",
    "InvestmentResponse",
    "MonthlyPayrollEntry",
    "MonthlyPayrollRow",
    "PERCENTAGE_OPERATIONS",
    "PayrollRequest",
    "PayrollResponse",
    "PayrollResult",
    "PayrollSummary",
    "PercentageOutcome",
    "PercentageRequest",
    "PercentageResponse",
    "ProjectionResult",
    "ProjectionRowEntry",
    "REGIME_PREFERENCE",
    "RegimeComparison",
    "RegimeEntry",
    "RegimeResult",
    "ResponseMeta",
    "RetirementAccountResult",
    "RetirementProjectionRow",
    "RetirementRequest",
    "RetirementResponse",
    "TaxRegime",
    "YearlyProjectionRow",
    "format_validation_error",
]
