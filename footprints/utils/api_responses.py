from __future__ import annotations

from functools import wraps
from typing import Dict, List, Optional

from flask import current_app, jsonify, Response


class InvalidQueryParameter(ValueError):
    """A required query parameter is missing or cannot be parsed."""

    def __init__(self, name: str, message: str):
        super().__init__(message)
        self.name = name


class BuildingNotFound(LookupError):
    """No building record carries the requested identifier."""

    def __init__(self, building_id: str):
        super().__init__(f"Building {building_id!r} not found")
        self.building_id = building_id


class APIResponse:
    """Standardized API error responses"""

    @staticmethod
    def error(message: str, errors: Optional[Dict] = None, status_code: int = 400) -> Response:
        response_data = {
            'success': False,
            'message': message,
            'errors': errors or {}
        }
        return jsonify(response_data), status_code

    @staticmethod
    def validation_error(errors: Dict[str, List[str]]) -> Response:
        return APIResponse.error(
            message="Invalid query parameters",
            errors=errors,
            status_code=400
        )

    @staticmethod
    def not_found(resource: str = "Resource") -> Response:
        return APIResponse.error(
            message=f"{resource} not found",
            status_code=404
        )


def api_route(func):
    """Decorator for API routes with consistent error handling"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except InvalidQueryParameter as e:
            return APIResponse.validation_error({e.name: [str(e)]})
        except BuildingNotFound as e:
            return APIResponse.not_found(f"Building {e.building_id}")
    return wrapper


def server_error() -> Response:
    current_app.logger.error("Unhandled API error", exc_info=True)
    return APIResponse.error("Internal server error", status_code=500)


__all__ = ['APIResponse', 'api_route', 'server_error', 'InvalidQueryParameter', 'BuildingNotFound']
