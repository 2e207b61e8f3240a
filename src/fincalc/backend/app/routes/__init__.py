"""Blueprint registrations for application routes."""

from flask import Flask


def register_routes(app: Flask) -> None:
    """Register all Flask blueprints with the provided application."""

    # Imported here because the service layer imports ``fincalc.backend.app.models``.
    from .calculations import blueprint as calculations_blueprint
    from .config import blueprint as config_blueprint

    app.register_blueprint(calculations_blueprint)
    app.register_blueprint(config_blueprint)
