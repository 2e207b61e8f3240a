"""Unit coverage for the calculation orchestration layer."""

from __future__ import annotations

import logging

import pytest

from fincalc.backend.app.models import PayrollRequest
from fincalc.backend.services.calculation_service import (
    calculate_business,
    calculate_investment,
    calculate_payroll,
    calculate_percentage_operation,
    calculate_retirement,
)


def test_payroll_defaults_to_latest_year_and_employee() -> None:
    result = calculate_payroll({"amount": 10000})

    assert result["mode"] == "gross"
    assert result["meta"] == {"year": 2025, "currency": "PLN"}
    assert result["summary"]["net_amount"] == pytest.approx(7446.91)
    assert result["summary"]["employer"]["total_cost"] == pytest.approx(12048.0)
    assert "monthly_breakdown" not in result["summary"]
    assert "iterations" not in result


def test_payroll_accepts_request_models() -> None:
    request_model = PayrollRequest(amount=11000, category="preferential")

    result = calculate_payroll(request_model)

    assert result["summary"]["net_amount"] == pytest.approx(8974.55)


def test_payroll_net_mode_reports_search_metadata() -> None:
    result = calculate_payroll({"year": 2025, "mode": "net", "amount": 7446.91})

    assert result["mode"] == "net"
    assert result["converged"] is True
    assert result["iterations"] >= 1
    assert result["summary"]["gross_amount"] == pytest.approx(10000.0, abs=1.0)


def test_payroll_net_mode_for_standard_category() -> None:
    result = calculate_payroll(
        {"mode": "net", "amount": 1449.74, "category": "standard"}
    )

    assert result["summary"]["gross_amount"] == pytest.approx(3250.0, abs=1.0)


def test_payroll_declining_salary_schedule() -> None:
    result = calculate_payroll(
        {"amount": 10000, "include_monthly_breakdown": True, "stable_salary": False}
    )
    months = result["summary"]["monthly_breakdown"]

    assert [month["gross_amount"] for month in months[:3]] == pytest.approx(
        [10000.0, 9950.0, 9900.0]
    )


def test_payroll_validation_errors_become_value_errors() -> None:
    with pytest.raises(ValueError, match="value cannot be negative"):
        calculate_payroll({"amount": -1})


def test_payroll_rejects_unknown_fields() -> None:
    with pytest.raises(ValueError, match="Invalid calculation payload"):
        calculate_payroll({"amount": 1000, "bonus": 200})


def test_payroll_rejects_non_mapping_payload() -> None:
    with pytest.raises(ValueError, match="mapping"):
        calculate_payroll([("amount", 1000)])  # type: ignore[arg-type]


def test_unknown_year_raises_file_not_found() -> None:
    with pytest.raises(FileNotFoundError):
        calculate_payroll({"year": 1999, "amount": 5000})


def test_business_converts_daily_rate_and_picks_best() -> None:
    result = calculate_business(
        {"revenue": 1000, "revenue_frequency": "daily", "costs": 2000, "lump_sum_rate": 12}
    )

    assert result["monthly_revenue"] == pytest.approx(22000.0)
    assert [entry["regime"] for entry in result["regimes"]] == ["scale", "linear", "lump_sum"]
    best = max(result["regimes"], key=lambda entry: entry["net_amount"])
    assert result["best"] == best["regime"]


def test_business_rejects_non_statutory_lump_sum_rate() -> None:
    with pytest.raises(ValueError, match="statutory lump-sum rate"):
        calculate_business({"revenue": 10000, "lump_sum_rate": 11})


def test_business_rejects_employee_category() -> None:
    with pytest.raises(ValueError, match="self-employment"):
        calculate_business({"revenue": 10000, "category": "employee"})


def test_investment_projection_payload() -> None:
    result = calculate_investment(
        {
            "initial_amount": 1000,
            "annual_return_rate": 0.1,
            "compounding_frequency": "annual",
            "duration_years": 2,
        }
    )

    assert result["final_balance"] == pytest.approx(1210.0)
    assert [row["period"] for row in result["yearly_data"]] == [1, 2]
    assert "age" not in result["yearly_data"][0]


def test_investment_rejects_daily_contributions() -> None:
    with pytest.raises(ValueError, match="daily"):
        calculate_investment(
            {
                "periodic_contribution": 10,
                "contribution_frequency": "daily",
                "annual_return_rate": 0.05,
                "duration_years": 1,
            }
        )


def test_retirement_payload_includes_ages() -> None:
    result = calculate_retirement(
        {
            "account": "IKZE",
            "contribution_amount": 1000,
            "current_age": 40,
            "target_age": 42,
            "annual_return_rate": 0,
            "payout_years": 10,
        }
    )

    assert result["account"] == "ikze"
    assert result["contribution_capped"] is True
    assert result["tax_relief"] == pytest.approx(2497.82)
    assert [row["age"] for row in result["yearly_data"]] == [41, 42]
    assert "estimated_public_pension" not in result


def test_retirement_rejects_target_before_current_age() -> None:
    with pytest.raises(ValueError, match="target_age"):
        calculate_retirement(
            {
                "account": "ike",
                "contribution_amount": 100,
                "current_age": 50,
                "target_age": 40,
                "annual_return_rate": 0.05,
            }
        )


def test_percentage_result_and_invalid_input() -> None:
    valid = calculate_percentage_operation({"operation": "part_of_whole", "a": 20, "b": 150})
    invalid = calculate_percentage_operation(
        {"operation": "ratio_as_percent", "a": 0, "b": 150}
    )

    assert valid == {
        "operation": "part_of_whole",
        "a": 20.0,
        "b": 150.0,
        "valid": True,
        "result": pytest.approx(30.0),
    }
    assert invalid["valid"] is False
    assert "result" not in invalid
    assert invalid["reason"]


def test_profiling_logs_section_timings(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("FINCALC_PROFILE_CALCULATIONS", "true")

    with caplog.at_level(logging.DEBUG, logger="fincalc.backend.services.calculation_service"):
        calculate_payroll({"amount": 10000})

    assert any("calculate_payroll timings" in record.getMessage() for record in caplog.records)
