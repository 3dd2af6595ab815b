"""Effective schedule resolution.

Check-in, the payroll calculator and the auto-close sweep all go through
`resolve_effective_schedule` so the lateness stored at check-in and the
lateness recomputed later use the same rule.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from ..branches.model import Branch
from ..common.datetime_utils import at_local_time, local_date, to_utc
from ..core.enums import ScheduleSource
from ..core.exceptions import ScheduleConfigError
from ..employees.model import ScheduleOverride
from ..employees.repository import EmployeeRepository
from .model import EffectiveSchedule


def resolve_effective_schedule(branch: Branch, override: Optional[ScheduleOverride] = None) -> EffectiveSchedule:
    if override is not None and override.is_complete:
        tolerance = override.tolerance_minutes
        if tolerance is None:
            tolerance = branch.tolerance_minutes
        return EffectiveSchedule(
            start_time=override.start_time,
            end_time=override.end_time,
            tolerance_minutes=int(tolerance or 0),
            source=ScheduleSource.EMPLOYEE_OVERRIDE,
        )

    if branch.has_business_hours:
        return EffectiveSchedule(
            start_time=branch.business_hours_start,
            end_time=branch.business_hours_end,
            tolerance_minutes=int(branch.tolerance_minutes or 0),
            source=ScheduleSource.BRANCH_DEFAULT,
        )

    raise ScheduleConfigError(f"No schedule configured for branch {branch.name!r}")


def active_override(employees: EmployeeRepository, employee_id: int, branch_id: int) -> Optional[ScheduleOverride]:
    """Override of the employee's assignment at the branch, if that assignment is active.

    An inactive assignment keeps its stored hours but they no longer apply.
    """
    assignment = employees.get_assignment(employee_id=employee_id, branch_id=branch_id)
    if assignment is None or not assignment.is_active:
        return None
    return assignment.schedule


def scheduled_start_at(schedule: EffectiveSchedule, day: date, zone_name: str) -> datetime:
    return at_local_time(day, schedule.start_time, zone_name)


def allowed_start_at(schedule: EffectiveSchedule, day: date, zone_name: str) -> datetime:
    return scheduled_start_at(schedule, day, zone_name) + timedelta(minutes=schedule.tolerance_minutes)


def closing_at(schedule: EffectiveSchedule, day: date, zone_name: str) -> datetime:
    """Closing instant of the shift that opens on `day` (next day for overnight shifts)."""
    closing = at_local_time(day, schedule.end_time, zone_name)
    if schedule.closes_next_day:
        closing = at_local_time(day + timedelta(days=1), schedule.end_time, zone_name)
    return closing


def is_late(check_in: datetime, schedule: EffectiveSchedule, zone_name: str) -> bool:
    """Strictly after the allowed start; arriving exactly on the boundary is on time."""
    day = local_date(check_in, zone_name)
    return to_utc(check_in) > to_utc(allowed_start_at(schedule, day, zone_name))
