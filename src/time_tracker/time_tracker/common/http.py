"""JSON plumbing shared by the feature controllers.

Domain errors map onto HTTP status codes here so controllers can let them
propagate. Anything else is an internal error: logged with its traceback and
reported without details.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import Flask, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..authorization.gateway import AuthorizationGateway, SessionIdentity
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)
from ..users.model import User

logger = logging.getLogger(__name__)

_ERROR_MAP: list[tuple[type[DomainError], int, str]] = [
    (ValidationError, 400, "VALIDATION_ERROR"),
    (AuthenticationError, 401, "UNAUTHORIZED"),
    (AuthorizationError, 403, "FORBIDDEN"),
    (NotFoundError, 404, "NOT_FOUND"),
    (ConflictError, 409, "CONFLICT"),
]


def error_body(code: str, message: str) -> dict:
    return {"status": "Error", "code": code, "message": message}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain_error(exc: DomainError):
        for exc_type, status, code in _ERROR_MAP:
            if isinstance(exc, exc_type):
                return jsonify(error_body(code, str(exc))), status
        return jsonify(error_body("BAD_REQUEST", str(exc))), 400

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return jsonify(error_body("HTTP_ERROR", exc.description or exc.name)), exc.code

    @app.errorhandler(Exception)
    def _unexpected(exc: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.path)
        return jsonify(error_body("INTERNAL_ERROR", "Internal Server Error")), 500


def make_login_required(gateway: AuthorizationGateway):
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            identity = SessionIdentity.from_session(session)
            if identity is None:
                raise AuthenticationError("Authentication required")
            try:
                g.current_user = gateway.resolve(identity)
            except AuthenticationError:
                session.clear()
                raise
            return view(*args, **kwargs)

        return wrapper

    return login_required


def current_user() -> User:
    return g.current_user


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer id")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer id")


def success(payload: Optional[dict] = None, *, message: Optional[str] = None, status: int = 200):
    body: dict = {"status": "Success"}
    if message:
        body["message"] = message
    if payload:
        body.update(payload)
    return jsonify(body), status
