from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..common.validators import require_non_empty, require_number
from ..core.enums import AssignmentStatus, EmployeeStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Note: plain data, no DB access. `phone` is the identifier used by the
    messaging channel that drives check-ins.
    """

    employee_id: int
    business_id: int
    full_name: str
    phone: str
    hourly_rate: float
    status: EmployeeStatus = EmployeeStatus.PENDING

    def __post_init__(self):
        require_non_empty(self.phone, "phone")
        if require_number(self.hourly_rate, "hourly_rate") <= 0:
            raise ValidationError("hourly_rate must be greater than 0")

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE


@dataclass(frozen=True)
class ScheduleOverride:
    """Per-branch schedule for one employee. Only complete when start and end are set."""

    start_time: Optional[time] = None
    end_time: Optional[time] = None
    tolerance_minutes: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return self.start_time is not None and self.end_time is not None


@dataclass(frozen=True)
class EmployeeBranchAssignment:
    employee_id: int
    branch_id: int
    status: AssignmentStatus = AssignmentStatus.ACTIVE
    schedule: Optional[ScheduleOverride] = None

    @property
    def is_active(self) -> bool:
        return self.status == AssignmentStatus.ACTIVE
