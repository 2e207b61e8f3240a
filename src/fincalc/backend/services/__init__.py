"""Service-layer helpers for the fincalc backend."""

from .calculation_service import (
    calculate_business,
    calculate_investment,
    calculate_payroll,
    calculate_percentage_operation,
    calculate_retirement,
)
from .request_parser import parse_calculation_payload
from .response_builder import build_calculation_response

__all__ = [
    "calculate_business",
    "calculate_investment",
    "calculate_payroll",
    "calculate_percentage_operation",
    "calculate_retirement",
    "parse_calculation_payload",
    "build_calculation_response",
]
