"""WSGI entrypoint for serving the fincalc API behind Passenger."""

from fincalc.backend.app import create_app

application = create_app()
