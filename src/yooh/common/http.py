"""JSON request/response helpers shared by the controllers."""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify, request
from flask_jwt_extended import get_jwt_identity
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AlreadySignedError,
    AuthenticationError,
    AuthorizationError,
    DomainError,
    MigrationError,
    NoActiveClassError,
    NotFoundError,
    OutsideZoneError,
    PermissionDeniedError,
    RemoteUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (AlreadySignedError, 409),
    (NoActiveClassError, 409),
    (OutsideZoneError, 409),
    (PermissionDeniedError, 409),
    (RemoteUnavailableError, 503),
    (MigrationError, 503),
)


def status_for(error: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 400


def error(message: str, status: int):
    return jsonify({"success": False, "msg": message}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def current_user_id() -> int:
    return int(get_jwt_identity())


def query_int(name: str, default: Optional[int] = None) -> Optional[int]:
    raw = request.args.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def domain_error(e: DomainError):
    """JSON error response for a service failure, with the status its type maps to."""
    if isinstance(e, AlreadySignedError):
        logger.debug("Duplicate sign rejected: %s", e)
    return error(str(e), status_for(e))


def register_error_handlers(app: Flask) -> None:
    """Fallback for anything a route does not handle itself."""

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return error(e.description or e.name, e.code or 500)
        if isinstance(e, DomainError):
            return domain_error(e)
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        if app.config.get("DEBUG"):
            return error(f"Server error: {e}", 500)
        return error("Server error", 500)
