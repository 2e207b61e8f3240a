"""Unit tests for calculation request parsing helpers."""

from __future__ import annotations

import pytest
from flask import Flask, request
from werkzeug.exceptions import BadRequest

from fincalc.backend.services.request_parser import parse_calculation_payload


def test_parse_payload_returns_copy_of_body(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations/payroll",
        method="POST",
        json={"year": 2025, "amount": 8000},
    ):
        payload = parse_calculation_payload(request)

    assert payload == {"year": 2025, "amount": 8000}


def test_parse_payload_reads_year_from_query_string(app: Flask) -> None:
    """A ``?year=`` hint fills in the year when the body omits it."""

    with app.test_request_context(
        "/api/v1/calculations/payroll?year=2025",
        method="POST",
        json={"amount": 8000},
    ):
        payload = parse_calculation_payload(request)

    assert payload["year"] == 2025


def test_parse_payload_prefers_body_year(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations/payroll?year=2030",
        method="POST",
        json={"year": 2025, "amount": 8000},
    ):
        payload = parse_calculation_payload(request)

    assert payload["year"] == 2025


def test_parse_payload_ignores_year_for_yearless_calculators(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations/percentage?year=2025",
        method="POST",
        json={"operation": "discount", "a": 10, "b": 100},
    ):
        payload = parse_calculation_payload(request, accepts_year=False)

    assert "year" not in payload


def test_parse_payload_rejects_non_numeric_year(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations/payroll?year=latest",
        method="POST",
        json={"amount": 8000},
    ):
        with pytest.raises(BadRequest):
            parse_calculation_payload(request)


def test_parse_payload_rejects_non_object(app: Flask) -> None:
    """Non-object JSON payloads should trigger BadRequest responses."""

    with app.test_request_context(
        "/api/v1/calculations/payroll",
        method="POST",
        json=[1, 2, 3],
    ):
        with pytest.raises(BadRequest):
            parse_calculation_payload(request)


def test_parse_payload_rejects_invalid_json(app: Flask) -> None:
    with app.test_request_context(
        "/api/v1/calculations/payroll",
        method="POST",
        data="{not json",
        content_type="application/json",
    ):
        with pytest.raises(BadRequest):
            parse_calculation_payload(request)
