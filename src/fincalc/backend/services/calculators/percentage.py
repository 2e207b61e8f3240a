"""Elementary percentage formulas.

Every formula takes the percentage (or reference value) ``a`` first and the
amount ``b`` second. Formulas dividing by ``a`` return :class:`InvalidInput`
when ``a`` is zero instead of producing ``inf`` or ``nan``.
"""

from __future__ import annotations

from collections.abc import Callable

from fincalc.backend.app.models import InvalidInput, PercentageOutcome


def part_of_whole(a: float, b: float) -> PercentageOutcome:
    """``a`` percent of ``b``."""

    return a * b / 100


def percent_change(a: float, b: float) -> PercentageOutcome:
    """Relative change from ``a`` to ``b`` in percent."""

    if a == 0:
        return InvalidInput("percentage change from zero is undefined")
    return (b - a) / abs(a) * 100


def add_percent(a: float, b: float) -> PercentageOutcome:
    return b + b * a / 100


def subtract_percent(a: float, b: float) -> PercentageOutcome:
    return b - b * a / 100


def ratio_as_percent(a: float, b: float) -> PercentageOutcome:
    """``b`` expressed as a percentage of ``a``."""

    if a == 0:
        return InvalidInput("ratio to zero is undefined")
    return b / a * 100


def discount(a: float, b: float) -> PercentageOutcome:
    """Price ``b`` after an ``a`` percent discount."""

    return subtract_percent(a, b)


OPERATIONS: dict[str, Callable[[float, float], PercentageOutcome]] = {
    "part_of_whole": part_of_whole,
    "percent_change": percent_change,
    "add_percent": add_percent,
    "subtract_percent": subtract_percent,
    "ratio_as_percent": ratio_as_percent,
    "discount": discount,
}


def calculate_percentage(operation: str, a: float, b: float) -> PercentageOutcome:
    """Dispatch to the formula registered under ``operation``."""

    try:
        formula = OPERATIONS[operation]
    except KeyError as exc:
        raise ValueError(f"Unsupported percentage operation '{operation}'") from exc
    return formula(a, b)


__all__ = [
    "OPERATIONS",
    "add_percent",
    "calculate_percentage",
    "discount",
    "part_of_whole",
    "percent_change",
    "ratio_as_percent",
    "subtract_percent",
]
