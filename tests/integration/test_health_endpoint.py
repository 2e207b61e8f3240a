"""Integration tests for the health endpoint."""

from http import HTTPStatus

from flask.testing import FlaskClient

from fincalc.backend.version import get_project_version


def test_health_reports_configured_tax_years(client: FlaskClient) -> None:
    response = client.get("/health")

    assert response.status_code == HTTPStatus.OK
    assert response.mimetype == "application/json"
    assert response.get_json() == {
        "status": "ok",
        "version": get_project_version(),
        "supported_years": [2025],
        "default_year": 2025,
    }


def test_health_is_not_part_of_the_versioned_api(client: FlaskClient) -> None:
    assert client.get("/api/v1/health").status_code == HTTPStatus.NOT_FOUND
