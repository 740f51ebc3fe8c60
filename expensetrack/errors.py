from flask import current_app
from werkzeug.exceptions import BadRequest, HTTPException

from .responses import failure


class APIError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message=None, errors=None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        self.errors = errors


class ValidationError(APIError):
    status_code = 400
    message = "Validation failed"


class NotFoundError(APIError):
    status_code = 404
    message = "Not found"


class ConflictError(APIError):
    status_code = 400
    message = "Record already exists"


class AuthenticationError(APIError):
    status_code = 401
    message = "Authentication required"


def field_error(field, message):
    return {"field": field, "message": message}


def register_error_handlers(app):
    @app.errorhandler(APIError)
    def handle_api_error(err):
        if isinstance(err, ValidationError):
            current_app.logger.warning("Validation failed: %s", err.errors)
        return failure(err.message, err.status_code, err.errors)

    @app.errorhandler(BadRequest)
    def handle_bad_request(err):
        return failure("Malformed request body", 400)

    @app.errorhandler(404)
    def handle_not_found(err):
        return failure("Route not found", 404)

    @app.errorhandler(405)
    def handle_method_not_allowed(err):
        return failure("Method not allowed", 405)

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        if isinstance(err, HTTPException):
            return failure(err.description or err.name, err.code or 500)
        current_app.logger.exception("Unhandled error: %s", err)
        extra = {"error": str(err)} if current_app.debug else {}
        return failure("Internal server error", 500, **extra)
