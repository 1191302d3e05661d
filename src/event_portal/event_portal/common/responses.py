from __future__ import annotations

import logging

from flask import jsonify

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Order matters: AuthenticationError is a NotFoundError.
_STATUS_BY_ERROR = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (ValidationError, 400),
)


def ok(payload: dict | None = None, status: int = 200):
    body = {"success": True}
    body.update(payload or {})
    return jsonify(body), status


def domain_error(exc: DomainError):
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return jsonify({"success": False, "message": str(exc)}), status
    return jsonify({"success": False, "message": str(exc)}), 400


def server_error(action: str):
    logger.exception("Unexpected error while %s", action)
    return jsonify({"success": False, "message": f"System error while {action}"}), 500
