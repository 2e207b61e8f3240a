"""Utilities for validating year configuration data and surfacing issues."""

from __future__ import annotations

import argparse
from collections import Counter
from typing import Mapping, Sequence

from .year_config import (
    ContributionConfig,
    HealthConfig,
    RetirementConfig,
    TaxConfig,
    YearConfiguration,
    available_years,
    load_year_configuration,
)

REQUIRED_CATEGORIES = ("standard", "preferential", "health_only")
REQUIRED_HEALTH_REGIMES = ("scale", "linear")
REQUIRED_ACCOUNTS = ("ike", "ikze")


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_rates(scope: str, rates: Mapping[str, float]) -> list[str]:
    errors: list[str] = []
    for label, value in rates.items():
        if value < 0 or value > 1:
            errors.append(
                _format_scope(scope, f"{label} rate {value} must be between 0 and 1")
            )
    return errors


def _validate_tax(tax: TaxConfig) -> list[str]:
    errors: list[str] = []

    for index, bracket in enumerate(tax.brackets):
        if bracket.rate > 1:
            errors.append(
                _format_scope(
                    "tax.brackets",
                    f"bracket {index} rate {bracket.rate} must be between 0 and 1",
                )
            )

    rates = list(tax.lump_sum_rates)
    duplicates = [value for value, count in Counter(rates).items() if count > 1]
    if duplicates:
        errors.append(
            _format_scope(
                "tax.lump_sum_rates",
                f"duplicate lump-sum rates detected: {sorted(duplicates)}",
            )
        )
    if rates != sorted(rates):
        errors.append(_format_scope("tax.lump_sum_rates", "lump-sum rates should be sorted"))

    return errors


def _validate_health(health: HealthConfig) -> list[str]:
    errors: list[str] = []

    for regime in REQUIRED_HEALTH_REGIMES:
        if regime not in health.rates:
            errors.append(
                _format_scope("contributions.health", f"missing rate for regime '{regime}'")
            )
    errors.extend(_validate_rates("contributions.health", health.rates))

    bounds = [tier.upper_bound for tier in health.lump_sum_tiers if tier.upper_bound is not None]
    if bounds != sorted(bounds) or len(set(bounds)) != len(bounds):
        errors.append(
            _format_scope(
                "contributions.health.lump_sum_tiers",
                "tier upper bounds must be strictly ascending",
            )
        )

    amounts = [tier.amount for tier in health.lump_sum_tiers]
    if amounts != sorted(amounts):
        errors.append(
            _format_scope(
                "contributions.health.lump_sum_tiers",
                "tier amounts must not decrease as revenue grows",
            )
        )

    if amounts and amounts[0] < health.minimum:
        errors.append(
            _format_scope(
                "contributions.health.lump_sum_tiers",
                "lowest tier amount cannot fall below the health minimum",
            )
        )

    return errors


def _validate_contributions(contributions: ContributionConfig) -> list[str]:
    errors: list[str] = []

    identifiers = [category.id for category in contributions.categories]
    for identifier, count in Counter(identifiers).items():
        if count > 1:
            errors.append(
                _format_scope(
                    "contributions.categories",
                    f"duplicate category identifier '{identifier}' detected",
                )
            )
    for required in REQUIRED_CATEGORIES:
        if required not in identifiers:
            errors.append(
                _format_scope(
                    "contributions.categories",
                    f"required category '{required}' is missing",
                )
            )

    for category in contributions.categories:
        if category.monthly_amount < 0:
            errors.append(
                _format_scope(
                    "contributions.categories",
                    f"category '{category.id}' monthly amount must be non-negative",
                )
            )
        if category.monthly_amount == 0 and category.basis > 0:
            errors.append(
                _format_scope(
                    "contributions.categories",
                    (
                        f"category '{category.id}' declares a sickness basis "
                        "without a social contribution"
                    ),
                )
            )

    errors.extend(
        _validate_rates(
            "contributions.employee_rates",
            contributions.employee_rates.model_dump(),
        )
    )
    errors.extend(_validate_health(contributions.health))

    return errors


def _validate_retirement(retirement: RetirementConfig) -> list[str]:
    errors: list[str] = []

    identifiers = [account.id for account in retirement.accounts]
    for identifier, count in Counter(identifiers).items():
        if count > 1:
            errors.append(
                _format_scope(
                    "retirement.accounts",
                    f"duplicate account identifier '{identifier}' detected",
                )
            )
    for required in REQUIRED_ACCOUNTS:
        if required not in identifiers:
            errors.append(
                _format_scope("retirement.accounts", f"required account '{required}' is missing")
            )

    for account in retirement.accounts:
        if account.annual_limit <= 0:
            errors.append(
                _format_scope(
                    f"retirement.accounts.{account.id}",
                    "annual limit must be positive",
                )
            )
        if account.relief == "deduction" and account.relief_rate <= 0:
            errors.append(
                _format_scope(
                    f"retirement.accounts.{account.id}",
                    "deduction-style accounts require a positive relief rate",
                )
            )

    return errors


def validate_year_configuration(config: YearConfiguration) -> list[str]:
    """Return a list of validation issues for the provided configuration."""

    errors: list[str] = []

    errors.extend(_validate_tax(config.tax))
    errors.extend(_validate_contributions(config.contributions))
    errors.extend(
        _validate_rates("payroll.employer_rates", config.payroll.employer_rates.model_dump())
    )
    errors.extend(_validate_rates("payroll.ppk", config.payroll.ppk.model_dump()))
    errors.extend(_validate_retirement(config.retirement))

    return errors


def validate_all_years(years: Sequence[int] | None = None) -> dict[int, list[str]]:
    """Validate all configured years and return issues keyed by year."""

    targets = years or available_years()
    results: dict[int, list[str]] = {}

    for year in targets:
        config = load_year_configuration(year)
        results[int(year)] = validate_year_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured tax years and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific years to validate (defaults to all configured years)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            config = load_year_configuration(year)
        except FileNotFoundError as error:
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_year_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
