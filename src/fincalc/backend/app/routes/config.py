"""Expose the statutory constants behind the calculators.

Front-ends use these endpoints to populate contributor categories, lump-sum
rates and account limits without duplicating the YAML configuration.
"""

from __future__ import annotations

from typing import Any

from flask import Blueprint, jsonify

from fincalc.backend.app.http import problem_response
from fincalc.backend.config.year_config import (
    YearConfiguration,
    available_years,
    load_manifest,
    load_year_configuration,
)
from fincalc.backend.version import get_project_version

blueprint = Blueprint("config", __name__, url_prefix="/api/v1/config")


def get_configuration_metadata() -> dict[str, Any]:
    """Expose runtime metadata derived from the configuration manifest."""

    manifest = load_manifest()
    supported_years = list(manifest.supported_years)
    default_year = supported_years[-1] if supported_years else None
    return {
        "version": get_project_version(),
        "supported_years": supported_years,
        "default_year": default_year,
    }


def _serialise_year(config: YearConfiguration) -> dict[str, Any]:
    manifest_entry = load_manifest().get_entry(config.year)
    payload = config.model_dump(mode="json", by_alias=True)
    payload["status"] = manifest_entry.status
    if manifest_entry.notes_url:
        payload["notes_url"] = manifest_entry.notes_url
    return payload


@blueprint.get("/meta")
def get_application_metadata() -> tuple[Any, int]:
    """Expose lightweight application metadata such as the version identifier."""

    return jsonify(get_configuration_metadata()), 200


@blueprint.get("/years")
def list_years() -> tuple[Any, int]:
    """Return all configured years with their statutory constants."""

    years = [_serialise_year(load_year_configuration(year)) for year in available_years()]
    metadata = get_configuration_metadata()
    payload = {
        "years": years,
        "default_year": metadata["default_year"],
        "supported_years": metadata["supported_years"],
        "version": metadata["version"],
    }
    return jsonify(payload), 200


@blueprint.get("/<int:year>")
def get_year(year: int) -> tuple[Any, int]:
    """Return the statutory constants configured for ``year``."""

    try:
        configuration = load_year_configuration(year)
    except FileNotFoundError as exc:
        return problem_response("not_found", status=404, message=str(exc)).to_response()

    return jsonify(_serialise_year(configuration)), 200
