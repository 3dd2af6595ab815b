"""Pure session transitions.

Neither function touches a repository; persistence and the atomicity of
the active-session invariant belong to the caller.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..branches.model import Branch, Coordinate
from ..core.enums import SessionStatus
from ..core.exceptions import BranchMismatchError, NoActiveSessionError
from ..employees.model import ScheduleOverride
from ..schedules.service import is_late, resolve_effective_schedule
from .model import AttendanceSession, StampedInstant


def open_session(
    *,
    employee_id: int,
    branch: Branch,
    coordinate: Coordinate,
    now: datetime,
    override: Optional[ScheduleOverride] = None,
) -> AttendanceSession:
    stamp = StampedInstant(instant=now, zone=branch.timezone)
    schedule = resolve_effective_schedule(branch, override)
    return AttendanceSession(
        session_id=None,
        employee_id=employee_id,
        branch_id=branch.branch_id,
        check_in=stamp,
        check_in_coordinate=coordinate,
        is_late=is_late(stamp.instant, schedule, branch.timezone),
        status=SessionStatus.ACTIVE,
    )


def close_session(
    session: Optional[AttendanceSession],
    *,
    branch: Branch,
    coordinate: Coordinate,
    now: datetime,
    session_branch: Optional[Branch] = None,
) -> AttendanceSession:
    """Close `session` at the geofence-matched `branch`.

    `session_branch` is the branch the session was opened at; it is only
    used to name that branch in the mismatch error.
    """
    if session is None or not session.is_active:
        raise NoActiveSessionError("No active check-in. Check in first.")

    if branch.branch_id != session.branch_id:
        original_name = session_branch.name if session_branch else None
        label = original_name or f"#{session.branch_id}"
        raise BranchMismatchError(
            f"Check-out must happen at the branch where you checked in ({label}).",
            original_branch_id=session.branch_id,
            original_branch_name=original_name,
        )

    return replace(
        session,
        check_out=StampedInstant(instant=now, zone=branch.timezone),
        check_out_coordinate=coordinate,
        status=SessionStatus.COMPLETED,
    )
