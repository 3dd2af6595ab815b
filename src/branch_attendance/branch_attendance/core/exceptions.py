from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "DOMAIN_ERROR"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"


class EmployeeNotFoundError(DomainError):
    """Raised when the employee does not exist or is not active."""

    code = "EMPLOYEE_NOT_FOUND"


class NotAssignedError(DomainError):
    """Raised when the employee has no active assignment at an active branch."""

    code = "NOT_ASSIGNED"


class GeofenceError(DomainError):
    """Raised when no candidate branch contains the reported coordinate."""

    code = "OUTSIDE_GEOFENCE"

    def __init__(
        self,
        message: str,
        *,
        nearest_branch_id: Optional[int] = None,
        nearest_branch_name: Optional[str] = None,
        nearest_distance_meters: Optional[float] = None,
    ):
        super().__init__(message)
        self.nearest_branch_id = nearest_branch_id
        self.nearest_branch_name = nearest_branch_name
        self.nearest_distance_meters = nearest_distance_meters


class DuplicateSessionError(DomainError):
    """Raised when checking in while another session is still active."""

    code = "DUPLICATE_SESSION"


class NoActiveSessionError(DomainError):
    """Raised when checking out without an active session."""

    code = "NO_ACTIVE_SESSION"


class BranchMismatchError(DomainError):
    """Raised when checking out at a branch other than the check-in branch."""

    code = "BRANCH_MISMATCH"

    def __init__(self, message: str, *, original_branch_id: int, original_branch_name: Optional[str] = None):
        super().__init__(message)
        self.original_branch_id = original_branch_id
        self.original_branch_name = original_branch_name


class ScheduleConfigError(DomainError):
    """Raised when neither an employee override nor branch hours are configured."""

    code = "SCHEDULE_NOT_CONFIGURED"


class AuthenticationError(DomainError):
    """Raised when a caller presents an invalid shared secret."""

    code = "UNAUTHORIZED"
