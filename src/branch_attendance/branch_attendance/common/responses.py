from __future__ import annotations

import hmac
from typing import Optional

from flask import jsonify, request

from ..core.exceptions import (
    AuthenticationError,
    BranchMismatchError,
    DomainError,
    DuplicateSessionError,
    EmployeeNotFoundError,
    GeofenceError,
    NoActiveSessionError,
    NotAssignedError,
    ScheduleConfigError,
    ValidationError,
)

_STATUS_BY_ERROR = [
    (ValidationError, 400),
    (AuthenticationError, 401),
    (NotAssignedError, 403),
    (EmployeeNotFoundError, 404),
    (DuplicateSessionError, 409),
    (NoActiveSessionError, 409),
    (BranchMismatchError, 409),
    (GeofenceError, 422),
    (ScheduleConfigError, 422),
]


def status_for(exc: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 400


def error_response(exc: DomainError):
    body = {"valid": False, "code": exc.code, "message": str(exc)}
    if isinstance(exc, GeofenceError) and exc.nearest_distance_meters is not None:
        body["nearest_branch"] = exc.nearest_branch_name
        body["nearest_distance_meters"] = round(exc.nearest_distance_meters, 1)
    if isinstance(exc, BranchMismatchError):
        body["original_branch_id"] = exc.original_branch_id
        body["original_branch_name"] = exc.original_branch_name
    return jsonify(body), status_for(exc)


def require_bearer(secret: Optional[str]) -> None:
    """Check `Authorization: Bearer <secret>`; an unset secret rejects everything."""
    header = request.headers.get("Authorization", "")
    token = header[len("Bearer "):] if header.startswith("Bearer ") else ""
    if not secret or not hmac.compare_digest(token.encode(), secret.encode()):
        raise AuthenticationError("Invalid API secret")
