from __future__ import annotations

from functools import wraps
from typing import Any, Optional

from flask import jsonify, request, session

from ..core.exceptions import (
    AuthorizationError,
    DomainError,
    InvalidLectureState,
    InvalidToken,
    LectureNotActive,
    NotEnrolled,
    NotFound,
    OutOfWindow,
    TokenExpired,
    TokenMismatch,
    ValidationError,
)

_HTTP_STATUS = {
    NotFound: 404,
    OutOfWindow: 403,
    NotEnrolled: 403,
    InvalidToken: 401,
    TokenMismatch: 403,
    TokenExpired: 401,
    LectureNotActive: 403,
    AuthorizationError: 403,
    InvalidLectureState: 409,
    ValidationError: 422,
}


def api_response(success: bool, message: str, data: Any = None, errors: Optional[dict] = None, status: int = 200):
    """Uniform JSON envelope used by every API endpoint."""
    body = {
        "success": success,
        "message": message,
        "data": data if data is not None else [],
        "errors": errors or {},
    }
    return jsonify(body), status


def domain_error_response(error: DomainError):
    status = next((_HTTP_STATUS[cls] for cls in type(error).__mro__ if cls in _HTTP_STATUS), 400)
    errors: dict = {"kind": error.kind}
    if isinstance(error, TokenExpired):
        errors["expired"] = True
    return api_response(False, str(error), errors=errors, status=status)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return api_response(False, "Unauthenticated.", status=401)
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
