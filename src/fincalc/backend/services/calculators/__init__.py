"""Domain-specific calculation helpers."""

from .business import compare_regimes, monthly_revenue_from_rate
from .contributions import compute_contributions, health_contribution, social_contributions
from .growth import project
from .payroll import gross_to_net, net_to_gross
from .percentage import OPERATIONS, calculate_percentage
from .retirement import project_retirement_account
from .utils import calculate_progressive_tax, round_currency

__all__ = [
    "OPERATIONS",
    "calculate_percentage",
    "calculate_progressive_tax",
    "compare_regimes",
    "compute_contributions",
    "gross_to_net",
    "health_contribution",
    "monthly_revenue_from_rate",
    "net_to_gross",
    "project",
    "project_retirement_account",
    "round_currency",
    "social_contributions",
]
