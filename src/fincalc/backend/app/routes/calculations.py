"""REST endpoints for the calculators."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, request

from fincalc.backend.services import (
    build_calculation_response,
    calculate_business,
    calculate_investment,
    calculate_payroll,
    calculate_percentage_operation,
    calculate_retirement,
    parse_calculation_payload,
)

blueprint = Blueprint("calculations", __name__, url_prefix="/api/v1/calculations")


@blueprint.post("/payroll")
def create_payroll_calculation() -> tuple[Any, int]:
    """Convert a salary from gross to net, or from net to gross with ``mode=net``."""

    payload = parse_calculation_payload(request)
    return build_calculation_response(calculate_payroll(payload))


@blueprint.post("/business")
def create_business_calculation() -> tuple[Any, int]:
    """Compare the self-employment taxation regimes."""

    payload = parse_calculation_payload(request)
    return build_calculation_response(calculate_business(payload))


@blueprint.post("/investment")
def create_investment_calculation() -> tuple[Any, int]:
    payload = parse_calculation_payload(request, accepts_year=False)
    return build_calculation_response(calculate_investment(payload))


@blueprint.post("/retirement")
def create_retirement_calculation() -> tuple[Any, int]:
    """Project an IKE or IKZE account."""

    payload = parse_calculation_payload(request)
    return build_calculation_response(calculate_retirement(payload))


@blueprint.post("/percentage")
def create_percentage_calculation() -> tuple[Any, int]:
    payload = parse_calculation_payload(request, accepts_year=False)
    return build_calculation_response(calculate_percentage_operation(payload))
