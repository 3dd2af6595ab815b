from __future__ import annotations

from enum import Enum


class BranchStatus(str, Enum):
    """Lifecycle of a branch. Inactive branches are soft-deleted."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class EmployeeStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"


class AssignmentStatus(str, Enum):
    """Status of one employee-branch assignment, independent of the employee status."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class SessionStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class AttendanceAction(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class ScheduleSource(str, Enum):
    EMPLOYEE_OVERRIDE = "employee_override"
    BRANCH_DEFAULT = "branch_default"
