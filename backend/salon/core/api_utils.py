"""
Common API utilities for consistent response formatting across all controllers.
"""

import logging
from typing import Any, List, Optional

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from salon.core.exceptions import SalonError, ValidationError

logger = logging.getLogger(__name__)


def api_response(
    success: bool,
    message: str,
    data: Optional[Any] = None,
    status_code: int = 200,
    errors: Optional[List[str]] = None,
) -> tuple:
    """
    Standardized API response format for all endpoints.

    Args:
        success: Whether the operation was successful
        message: Human-readable message about the operation
        data: Optional data payload
        status_code: HTTP status code
        errors: Optional list of field-level error messages

    Returns:
        Tuple of (json_response, status_code)
    """
    response = {"success": success, "message": message}

    if data is not None:
        response["data"] = data

    if errors:
        response["errors"] = errors

    return jsonify(response), status_code


def get_json_body() -> Any:
    """Return the parsed JSON body, or raise ValidationError when absent."""
    payload = request.get_json(silent=True)
    if payload is None:
        raise ValidationError("Request body must be valid JSON")
    return payload


def register_error_handlers(app: Flask) -> None:
    """Map domain and HTTP errors onto the JSON envelope."""

    @app.errorhandler(SalonError)
    def handle_salon_error(error: SalonError):
        log = logger.warning if error.status_code < 500 else logger.error
        log(
            f"Request failed: {error.message}",
            extra={
                "context": {
                    "error_code": error.error_code,
                    "status_code": error.status_code,
                    "path": request.path,
                    "method": request.method,
                    "request_id": getattr(g, "request_id", None),
                }
            },
        )
        errors = getattr(error, "errors", None)
        return api_response(False, error.message, None, error.status_code, errors)

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return api_response(
            False, error.description or error.name, None, error.code or 500
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        logger.error(
            "Unhandled exception",
            extra={
                "context": {
                    "path": request.path,
                    "method": request.method,
                    "error_type": type(error).__name__,
                    "request_id": getattr(g, "request_id", None),
                }
            },
            exc_info=True,
        )
        return api_response(False, "Internal server error", None, 500)
