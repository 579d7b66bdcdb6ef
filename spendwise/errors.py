from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError

from .extensions import db


class SpendwiseError(Exception):
    status_code = 500
    kind = "error"

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or []

    def to_response(self):
        body = {"ok": False, "error": self.kind, "message": self.message}
        if self.details:
            body["details"] = self.details
        return jsonify(body), self.status_code


class ValidationError(SpendwiseError):
    """Rejected input. Raised before anything is written."""
    status_code = 400
    kind = "validation_error"


class StorageError(SpendwiseError):
    """A write could not be persisted, or no store is configured."""
    status_code = 503
    kind = "storage_error"


class NotFoundError(SpendwiseError):
    status_code = 404
    kind = "not_found"


class AuthError(SpendwiseError):
    status_code = 401
    kind = "unauthorized"


def register_error_handlers(app):
    @app.errorhandler(SpendwiseError)
    def handle_spendwise_error(exc):
        if isinstance(exc, StorageError):
            app.logger.error("Storage failure: %s", exc.message)
        return exc.to_response()

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(exc):
        db.session.rollback()
        app.logger.error("Database error: %s", exc, exc_info=True)
        return StorageError("Database not available").to_response()

    @app.errorhandler(404)
    def handle_not_found(exc):
        return NotFoundError("Resource not found").to_response()

    @app.errorhandler(405)
    def handle_method_not_allowed(exc):
        return jsonify({"ok": False, "error": "method_not_allowed", "message": "Method not allowed"}), 405
