"""Utility helpers for calculator modules."""

from __future__ import annotations

from collections.abc import Sequence

from fincalc.backend.config.year_config import TaxBracket


def calculate_progressive_tax(amount: float, brackets: Sequence[TaxBracket]) -> float:
    """Calculate progressive tax for ``amount`` using ``brackets``.

    Upper bounds are inclusive: an amount equal to a bound is taxed entirely
    within the lower bracket. Non-positive amounts yield no tax.
    """

    if amount <= 0:
        return 0.0

    total = 0.0
    lower_bound = 0.0

    for bracket in brackets:
        upper = bracket.upper_bound
        if upper is None or amount <= upper:
            total += (amount - lower_bound) * bracket.rate
            break

        total += (upper - lower_bound) * bracket.rate
        lower_bound = upper

    return total


def annual_progressive_tax(
    monthly_base: float,
    brackets: Sequence[TaxBracket],
    months_per_year: int = 12,
) -> float:
    """Annualise ``monthly_base``, apply ``brackets`` and return the monthly share."""

    annual_base = monthly_base * months_per_year
    return calculate_progressive_tax(annual_base, brackets) / months_per_year


def clamp_non_negative(value: float) -> float:
    return value if value > 0 else 0.0


def round_currency(value: float) -> float:
    """Round monetary amounts to two decimals."""

    return round(value, 2)

