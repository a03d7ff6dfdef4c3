"""Global resilience and error-handler registration.

Synopsis:
Registers teardown and error handlers so every failure leaves the session
clean and reaches the client as a JSON error body.

Glossary:
- Resilience handler: Global request teardown/error behavior for known failures.
"""

from __future__ import annotations

from flask import request
from sqlalchemy.exc import DBAPIError, OperationalError
from werkzeug.exceptions import HTTPException

from .extensions import db
from .utils.api_responses import APIResponse, server_error


def register_resilience_handlers(app) -> None:
    """Install global DB rollback plus JSON error handlers."""

    @app.teardown_request
    def _rollback_on_error(exc):
        try:
            if exc is not None:
                db.session.rollback()
        finally:
            db.session.remove()

    @app.errorhandler(OperationalError)
    @app.errorhandler(DBAPIError)
    def _db_error_handler(error):
        db.session.rollback()
        app.logger.error("Database error on %s: %s", request.path, error)
        return APIResponse.error("Service temporarily unavailable. Please try again shortly.", status_code=503)

    @app.errorhandler(HTTPException)
    def _http_error_handler(error: HTTPException):
        if error.code == 404:
            return APIResponse.not_found("Route")
        if error.code == 429:
            app.logger.warning("Rate limit exceeded for %s on %s", request.remote_addr, request.path)
        return APIResponse.error(error.description or error.name, status_code=error.code or 500)

    @app.errorhandler(Exception)
    def _unhandled_error_handler(_error):
        db.session.rollback()
        return server_error()
