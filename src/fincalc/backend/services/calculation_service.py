"""Orchestrate request validation, configuration lookup and calculations.

Each public function accepts a raw mapping (as decoded from JSON) or an
already-built request model, validates it, resolves the statutory constants
for the requested year and hands plain numbers to the calculators. Results are
converted back into the response models so routes only need to ``jsonify``
them. Profiling hooks live here so the calculators stay free of timing code.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from time import perf_counter
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from fincalc.backend.app.models import (
    BusinessRequest,
    BusinessResponse,
    ContributionResult,
    EmployerCost,
    InvalidInput,
    InvestmentParams,
    InvestmentRequest,
    InvestmentResponse,
    PayrollRequest,
    PayrollResponse,
    PayrollResult,
    PercentageRequest,
    PercentageResponse,
    RegimeResult,
    RetirementRequest,
    RetirementResponse,
    YearlyProjectionRow,
    format_validation_error,
)
from fincalc.backend.config.year_config import (
    YearConfiguration,
    default_year,
    load_year_configuration,
)

from .calculators import (
    calculate_percentage,
    compare_regimes,
    gross_to_net,
    monthly_revenue_from_rate,
    net_to_gross,
    project,
    project_retirement_account,
)

_LOGGER = logging.getLogger(__name__)

RequestModel = TypeVar("RequestModel", bound=BaseModel)


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("FINCALC_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def _log_timings(operation: str, timings: dict[str, float] | None) -> None:
    if timings is None:
        return
    _LOGGER.debug(
        "%s timings (ms): %s",
        operation,
        {name: round(duration * 1000, 3) for name, duration in timings.items()},
    )


def _validate_request(
    model: type[RequestModel], payload: Mapping[str, Any] | RequestModel
) -> RequestModel:
    if isinstance(payload, model):
        data: Any = payload.model_dump(mode="python")
    elif isinstance(payload, Mapping):
        data = payload
    else:
        raise ValueError("Payload must be a mapping")

    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc


def _resolve_configuration(year: int | None) -> YearConfiguration:
    return load_year_configuration(default_year() if year is None else year)


def _meta(config: YearConfiguration) -> dict[str, Any]:
    return {"year": config.year, "currency": str(config.meta.get("currency", "PLN"))}


def _contributions_payload(contributions: ContributionResult) -> dict[str, Any]:
    return {
        "social_contribution": contributions.social_contribution,
        "health_contribution": contributions.health_contribution,
        "voluntary_sickness_contribution": contributions.voluntary_sickness_contribution,
        "basis": contributions.basis,
        "total": round(contributions.total, 2),
    }


def _employer_payload(employer: EmployerCost) -> dict[str, Any]:
    return {
        "retirement": employer.retirement,
        "disability": employer.disability,
        "accident": employer.accident,
        "labour_fund": employer.labour_fund,
        "fgsp": employer.fgsp,
        "ppk": employer.ppk,
        "contributions": round(employer.contributions, 2),
        "total_cost": employer.total_cost,
    }


def _payroll_summary(result: PayrollResult) -> dict[str, Any]:
    summary: dict[str, Any] = {
        "gross_amount": result.gross_amount,
        "social_contribution": result.social_contribution,
        "voluntary_sickness_contribution": result.voluntary_sickness_contribution,
        "health_contribution": result.health_contribution,
        "total_contributions": result.total_contributions,
        "taxable_base": result.taxable_base,
        "cost_of_income": result.cost_of_income,
        "tax_amount": result.tax_amount,
        "ppk_contribution": result.ppk_contribution,
        "net_amount": result.net_amount,
    }
    if result.contribution_breakdown:
        summary["contribution_breakdown"] = dict(result.contribution_breakdown)
    if result.employer is not None:
        summary["employer"] = _employer_payload(result.employer)
    if result.monthly_breakdown:
        summary["monthly_breakdown"] = [
            {
                "month": row.month,
                "gross_amount": row.gross_amount,
                "cumulative_taxable_base": row.cumulative_taxable_base,
                "tax_amount": row.tax_amount,
                "net_amount": row.net_amount,
            }
            for row in result.monthly_breakdown
        ]
    return summary


def _regime_payload(result: RegimeResult) -> dict[str, Any]:
    return {
        "regime": result.regime,
        "gross_amount": result.gross_amount,
        "deductible_costs": result.deductible_costs,
        "taxable_base": result.taxable_base,
        "tax_amount": result.tax_amount,
        "total_contributions": result.total_contributions,
        "net_amount": result.net_amount,
        "contributions": _contributions_payload(result.contributions),
    }


def _projection_rows(rows: tuple[YearlyProjectionRow, ...]) -> list[dict[str, Any]]:
    payload: list[dict[str, Any]] = []
    for row in rows:
        entry: dict[str, Any] = {
            "period": row.period,
            "cumulative_principal": row.cumulative_principal,
            "cumulative_interest": row.cumulative_interest,
            "balance": row.balance,
        }
        age = getattr(row, "age", None)
        if age is not None:
            entry["age"] = age
        payload.append(entry)
    return payload


def calculate_payroll(payload: Mapping[str, Any] | PayrollRequest) -> dict[str, Any]:
    """Convert a monthly salary between gross and net."""

    request_model = _validate_request(PayrollRequest, payload)
    timings: dict[str, float] | None = {} if _profiling_enabled() else None

    with _profile_section("configuration", timings):
        config = _resolve_configuration(request_model.year)

    options: dict[str, Any] = {
        "voluntary_sickness": request_model.voluntary_sickness,
        "accident_rate": request_model.accident_rate,
        "include_fgsp": request_model.include_fgsp,
        "include_employer_cost": request_model.include_employer_cost,
        "include_monthly_breakdown": request_model.include_monthly_breakdown,
        "stable_salary": request_model.stable_salary,
    }
    arguments = (
        request_model.amount,
        request_model.category,
        request_model.over_26,
        request_model.remote_work_allowance,
        request_model.tax_credit_count,
        request_model.ppk_opt_in,
        config,
    )

    response: dict[str, Any] = {"mode": request_model.mode, "meta": _meta(config)}
    if request_model.mode == "net":
        with _profile_section("net_to_gross", timings):
            inverse = net_to_gross(*arguments, **options)
        response["summary"] = _payroll_summary(inverse.result)
        response["iterations"] = inverse.iterations
        response["converged"] = inverse.converged
    else:
        with _profile_section("gross_to_net", timings):
            result = gross_to_net(*arguments, **options)
        response["summary"] = _payroll_summary(result)

    _log_timings("calculate_payroll", timings)
    response_model = PayrollResponse.model_validate(response)
    return response_model.model_dump(mode="json", exclude_none=True)


def calculate_business(payload: Mapping[str, Any] | BusinessRequest) -> dict[str, Any]:
    """Compare the self-employment taxation regimes for the given revenue."""

    request_model = _validate_request(BusinessRequest, payload)
    timings: dict[str, float] | None = {} if _profiling_enabled() else None

    with _profile_section("configuration", timings):
        config = _resolve_configuration(request_model.year)

    allowed_rates = config.tax.lump_sum_rates
    if allowed_rates and request_model.lump_sum_rate not in allowed_rates:
        allowed = ", ".join(f"{rate:g}" for rate in allowed_rates)
        raise ValueError(
            f"Field 'lump_sum_rate' must match a statutory lump-sum rate ({allowed})"
        )

    revenue = monthly_revenue_from_rate(
        request_model.revenue, request_model.revenue_frequency, config.business
    )

    with _profile_section("compare_regimes", timings):
        comparison = compare_regimes(
            revenue,
            request_model.costs,
            request_model.lump_sum_rate,
            request_model.category,
            request_model.voluntary_sickness,
            config,
        )

    _log_timings("calculate_business", timings)
    response_model = BusinessResponse.model_validate(
        {
            "monthly_revenue": comparison.monthly_revenue,
            "best": comparison.best,
            "regimes": [
                _regime_payload(comparison.scale),
                _regime_payload(comparison.linear),
                _regime_payload(comparison.lump_sum),
            ],
            "meta": _meta(config),
        }
    )
    return response_model.model_dump(mode="json", exclude_none=True)


def calculate_investment(
    payload: Mapping[str, Any] | InvestmentRequest,
) -> dict[str, Any]:
    """Project a compound-interest investment year by year."""

    request_model = _validate_request(InvestmentRequest, payload)
    timings: dict[str, float] | None = {} if _profiling_enabled() else None

    params = InvestmentParams(
        initial_amount=request_model.initial_amount,
        periodic_contribution=request_model.periodic_contribution,
        contribution_frequency=request_model.contribution_frequency,
        annual_return_rate=request_model.annual_return_rate,
        compounding_frequency=request_model.compounding_frequency,
        duration_years=request_model.duration_years,
    )
    with _profile_section("project", timings):
        projection = project(params)

    _log_timings("calculate_investment", timings)
    response_model = InvestmentResponse.model_validate(
        {
            "final_balance": projection.final_balance,
            "total_contributed": projection.total_contributed,
            "total_interest": projection.total_interest,
            "yearly_data": _projection_rows(projection.yearly_data),
        }
    )
    return response_model.model_dump(mode="json", exclude_none=True)


def calculate_retirement(
    payload: Mapping[str, Any] | RetirementRequest,
) -> dict[str, Any]:
    """Project an IKE or IKZE account and its tax effects."""

    request_model = _validate_request(RetirementRequest, payload)
    timings: dict[str, float] | None = {} if _profiling_enabled() else None

    with _profile_section("configuration", timings):
        config = _resolve_configuration(request_model.year)

    with _profile_section("project_retirement_account", timings):
        result = project_retirement_account(
            request_model.account,
            request_model.contribution_amount,
            request_model.contribution_frequency,
            request_model.current_age,
            request_model.target_age,
            request_model.annual_return_rate,
            request_model.payout_years,
            config,
            monthly_salary=request_model.monthly_salary,
        )

    _log_timings("calculate_retirement", timings)
    response_model = RetirementResponse.model_validate(
        {
            "account": result.account,
            "relief": result.relief,
            "annual_contribution": result.annual_contribution,
            "contribution_capped": result.contribution_capped,
            "final_balance": result.final_balance,
            "total_contributed": result.total_contributed,
            "total_interest": result.total_interest,
            "profit_percentage": result.profit_percentage,
            "tax_relief": result.tax_relief,
            "yearly_tax_relief": result.yearly_tax_relief,
            "capital_gains_tax_avoided": result.capital_gains_tax_avoided,
            "monthly_pension": result.monthly_pension,
            "estimated_public_pension": result.estimated_public_pension,
            "payout_age_warning": result.payout_age_warning,
            "yearly_data": _projection_rows(result.yearly_data),
            "meta": _meta(config),
        }
    )
    return response_model.model_dump(mode="json", exclude_none=True)


def calculate_percentage_operation(
    payload: Mapping[str, Any] | PercentageRequest,
) -> dict[str, Any]:
    """Evaluate one percentage formula.

    Undefined results (a zero divisor) are reported with ``valid`` set to
    ``False`` and a ``reason`` rather than as an error response.
    """

    request_model = _validate_request(PercentageRequest, payload)
    outcome = calculate_percentage(request_model.operation, request_model.a, request_model.b)

    response: dict[str, Any] = {
        "operation": request_model.operation,
        "a": request_model.a,
        "b": request_model.b,
    }
    if isinstance(outcome, InvalidInput):
        response.update({"valid": False, "reason": outcome.reason})
    else:
        response.update({"valid": True, "result": outcome})

    response_model = PercentageResponse.model_validate(response)
    return response_model.model_dump(mode="json", exclude_none=True)


__all__ = [
    "calculate_business",
    "calculate_investment",
    "calculate_payroll",
    "calculate_percentage_operation",
    "calculate_retirement",
]
