from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from flask import jsonify
from flask_limiter.errors import RateLimitExceeded
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong!"


class ApiError(Exception):
    """Base for errors that map straight onto an HTTP response."""

    status_code = 500
    message = GENERIC_ERROR

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(ApiError):
    status_code = 400
    message = "Validation failed"

    def __init__(self, errors: List[Dict[str, str]]):
        self.errors = errors
        super().__init__("; ".join(f"{e['field']}: {e['message']}" for e in errors))

    def to_dict(self) -> Dict[str, Any]:
        return {"errors": self.errors}


class InvalidCredentials(ApiError):
    status_code = 400
    message = "Invalid credentials"


class Unauthorized(ApiError):
    status_code = 401
    message = "No token provided"


class Forbidden(ApiError):
    status_code = 403
    message = "Admin access required"


class NotFound(ApiError):
    status_code = 404
    message = "Not found"


class Conflict(ApiError):
    status_code = 409
    message = "Conflict"


class Internal(ApiError):
    status_code = 500


def field_error(field: str, message: str) -> Dict[str, str]:
    return {"field": field, "message": message}


def register_error_handlers(app) -> None:
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(RateLimitExceeded)
    def handle_rate_limit(err: RateLimitExceeded):
        return jsonify({"error": "Too many requests, please try again later."}), 429

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        return jsonify({"error": err.description or err.name}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        logger.exception("Unhandled error: %s", err)
        internal = Internal()
        return jsonify(internal.to_dict()), internal.status_code
