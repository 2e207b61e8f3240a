"""Flask application factory for the fincalc JSON API."""

import os
from warnings import warn

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import BadRequest

from .http import problem_response
from .routes import register_routes
from .routes.config import get_configuration_metadata

ALLOWED_ORIGINS_ENV = "FINCALC_ALLOWED_ORIGINS"


def _parse_allowed_origins(raw: str | None) -> list[str]:
    """Split a comma-separated allow-list into sorted, de-duplicated origins."""

    if not raw:
        return []
    return sorted({origin.strip() for origin in raw.split(",") if origin.strip()})


def _configure_cors(app: Flask) -> None:
    origins = _parse_allowed_origins(os.getenv(ALLOWED_ORIGINS_ENV))
    if not origins:
        warn(
            f"{ALLOWED_ORIGINS_ENV} is empty; cross-origin requests will be rejected.",
            stacklevel=2,
        )

    CORS(
        app,
        resources={r"/api/*": {"origins": origins}},
        supports_credentials=False,
        methods=["GET", "OPTIONS", "POST"],
        allow_headers=["Content-Type"],
    )


def _register_error_handlers(app: Flask) -> None:
    """Map request, configuration and calculation failures onto problem bodies."""

    @app.errorhandler(BadRequest)
    def handle_bad_request(error: BadRequest):
        message = error.description or "Invalid request"
        return problem_response("bad_request", status=400, message=message).to_response()

    @app.errorhandler(FileNotFoundError)
    def handle_missing_year(error: FileNotFoundError):
        return problem_response("not_found", status=404, message=str(error)).to_response()

    @app.errorhandler(ValueError)
    def handle_value_error(error: ValueError):
        return problem_response(
            "validation_error", status=400, message=str(error)
        ).to_response()


def create_app() -> Flask:
    """Create the API application with CORS, blueprints and error handlers."""

    app = Flask(__name__)

    _configure_cors(app)
    register_routes(app)
    _register_error_handlers(app)

    @app.get("/health")
    def health_check():
        """Liveness check that also reports the configured tax years."""

        return jsonify({"status": "ok", **get_configuration_metadata()})

    return app
