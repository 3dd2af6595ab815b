from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple

from ..branches.model import Branch, Coordinate
from ..branches.repository import BranchRepository
from ..common.datetime_utils import Clock, SystemClock, day_bounds_utc, local_date
from ..core.constants import DEFAULT_TIMEZONE
from ..core.enums import AttendanceAction
from ..core.exceptions import (
    DuplicateSessionError,
    EmployeeNotFoundError,
    GeofenceError,
    NoActiveSessionError,
    NotAssignedError,
)
from ..employees.model import Employee, EmployeeBranchAssignment
from ..employees.repository import EmployeeRepository
from ..geofence.resolver import GeofenceMatch, nearest_branch, resolve_branch
from .factory import determine_action
from .model import AttendanceSession
from .repository import AttendanceRepository
from .transitions import close_session, open_session

logger = logging.getLogger(__name__)

Candidate = Tuple[Branch, EmployeeBranchAssignment]


@dataclass(frozen=True)
class AttendanceResult:
    action: AttendanceAction
    session: AttendanceSession
    branch: Branch
    distance_meters: float

    @property
    def hours_worked(self) -> Optional[float]:
        if self.session.check_out is None:
            return None
        delta = self.session.check_out.instant - self.session.check_in.instant
        return delta.total_seconds() / 3600


class AttendanceService:
    """Use cases: geofenced check-in / check-out and the "last action" query."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        branches: BranchRepository,
        *,
        clock: Optional[Clock] = None,
        default_timezone: str = DEFAULT_TIMEZONE,
    ):
        self._attendance = attendance
        self._employees = employees
        self._branches = branches
        self._clock = clock or SystemClock()
        self._default_timezone = default_timezone

    # ---- queries ----

    def get_employee_by_phone(self, phone: str) -> Employee:
        employee = self._employees.get_by_phone(phone)
        if not employee or not employee.is_active:
            raise EmployeeNotFoundError("Employee not found or inactive")
        return employee

    def get_active_session(self, employee_id: int) -> Optional[AttendanceSession]:
        return self._attendance.get_active_for_employee(employee_id)

    def find_today_session(
        self, employee_id: int, *, zone_name: Optional[str] = None, now: Optional[datetime] = None
    ) -> Optional[AttendanceSession]:
        """Active session checked in during "today" in the reference zone."""
        zone_name = zone_name or self._default_timezone
        now = now or self._clock.now()
        start, end = day_bounds_utc(local_date(now, zone_name), zone_name)
        return self._attendance.find_active_checked_in_between(employee_id, start, end)

    def determine_action(
        self,
        employee_id: int,
        *,
        zone_name: Optional[str] = None,
        requested: Optional[AttendanceAction] = None,
    ) -> AttendanceAction:
        today = self.find_today_session(employee_id, zone_name=zone_name)
        return determine_action(today, requested)

    # ---- commands ----

    def register(
        self,
        employee_id: int,
        coordinate: Coordinate,
        *,
        action: Optional[AttendanceAction] = None,
    ) -> AttendanceResult:
        """Determine the action for this reading and apply it."""
        now = self._clock.now()
        employee = self._require_employee(employee_id)
        candidates = self._candidates(employee)
        match = self._match(coordinate, candidates)

        today = self.find_today_session(employee.employee_id, zone_name=match.branch.timezone, now=now)
        decided = determine_action(today, action)
        logger.debug("employee=%s action=%s (requested=%s)", employee_id, decided.value, action)

        if decided == AttendanceAction.CHECK_IN:
            return self._check_in(employee, candidates, match, coordinate, now)
        return self._check_out(employee, match, coordinate, now)

    def check_in(self, employee_id: int, coordinate: Coordinate) -> AttendanceResult:
        now = self._clock.now()
        employee = self._require_employee(employee_id)
        candidates = self._candidates(employee)
        match = self._match(coordinate, candidates)
        return self._check_in(employee, candidates, match, coordinate, now)

    def check_out(self, employee_id: int, coordinate: Coordinate) -> AttendanceResult:
        now = self._clock.now()
        employee = self._require_employee(employee_id)
        candidates = self._candidates(employee)
        match = self._match(coordinate, candidates)
        return self._check_out(employee, match, coordinate, now)

    # ---- internals ----

    def _require_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee or not employee.is_active:
            raise EmployeeNotFoundError("Employee not found or inactive")
        return employee

    def _candidates(self, employee: Employee) -> List[Candidate]:
        assignments = [a for a in self._employees.list_assignments(employee.employee_id) if a.is_active]
        by_branch = {a.branch_id: a for a in assignments}
        branches = self._branches.list_by_ids([a.branch_id for a in assignments])
        candidates = [(b, by_branch[b.branch_id]) for b in branches if b.is_active and b.branch_id in by_branch]
        if not candidates:
            raise NotAssignedError("You have no active branches assigned")
        return candidates

    def _match(self, coordinate: Coordinate, candidates: List[Candidate]) -> GeofenceMatch:
        branches = [b for b, _ in candidates]
        match = resolve_branch(coordinate, branches)
        if match is not None:
            return match

        nearest = nearest_branch(coordinate, branches)
        logger.info(
            "Geofence rejected: nearest branch %s at %.1f m",
            nearest.branch.branch_id,
            nearest.distance_meters,
        )
        raise GeofenceError(
            f"You are not at any assigned branch. Nearest is {nearest.branch.name} "
            f"({nearest.distance_meters:.0f} m away, allowed {nearest.branch.tolerance_radius_meters:.0f} m).",
            nearest_branch_id=nearest.branch.branch_id,
            nearest_branch_name=nearest.branch.name,
            nearest_distance_meters=nearest.distance_meters,
        )

    def _check_in(
        self,
        employee: Employee,
        candidates: List[Candidate],
        match: GeofenceMatch,
        coordinate: Coordinate,
        now: datetime,
    ) -> AttendanceResult:
        if self._attendance.get_active_for_employee(employee.employee_id) is not None:
            raise DuplicateSessionError("You already have an active check-in. Check out first.")

        assignment = next(a for b, a in candidates if b.branch_id == match.branch.branch_id)
        session = open_session(
            employee_id=employee.employee_id,
            branch=match.branch,
            coordinate=coordinate,
            now=now,
            override=assignment.schedule,
        )
        # Raises DuplicateSessionError if a concurrent check-in won the race.
        saved = self._attendance.create_session(session)

        logger.info(
            "Check-in employee=%s branch=%s late=%s at %s",
            employee.employee_id,
            match.branch.branch_id,
            saved.is_late,
            saved.check_in.isoformat(),
        )
        return AttendanceResult(
            action=AttendanceAction.CHECK_IN,
            session=saved,
            branch=match.branch,
            distance_meters=match.distance_meters,
        )

    def _check_out(
        self,
        employee: Employee,
        match: GeofenceMatch,
        coordinate: Coordinate,
        now: datetime,
    ) -> AttendanceResult:
        active = self._attendance.get_active_for_employee(employee.employee_id)
        session_branch = self._branches.get_by_id(active.branch_id) if active else None
        closed = close_session(
            active,
            branch=match.branch,
            coordinate=coordinate,
            now=now,
            session_branch=session_branch,
        )

        updated = self._attendance.close_session(
            session_id=closed.session_id,
            check_out=closed.check_out,
            check_out_coordinate=closed.check_out_coordinate,
        )
        if not updated:
            raise NoActiveSessionError("The check-in was already closed.")

        result = AttendanceResult(
            action=AttendanceAction.CHECK_OUT,
            session=closed,
            branch=match.branch,
            distance_meters=match.distance_meters,
        )
        logger.info(
            "Check-out employee=%s branch=%s hours=%.2f",
            employee.employee_id,
            match.branch.branch_id,
            result.hours_worked,
        )
        return result
