from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..branches.model import Coordinate
from .model import AttendanceSession, StampedInstant


class AttendanceRepository(Protocol):
    """Persistence contract for attendance sessions.

    `create_session` must be an atomic compare-and-insert: it raises
    DuplicateSessionError when the employee already has an active session,
    even under concurrent callers. `close_session` only touches a row that is
    still active and returns False otherwise.
    """

    def get_active_for_employee(self, employee_id: int) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def find_active_checked_in_between(
        self, employee_id: int, start: datetime, end: datetime
    ) -> Optional[AttendanceSession]:
        """Active session whose check-in instant is in the UTC window [start, end)."""

        raise NotImplementedError

    def list_active(self) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def list_completed_between(
        self,
        start: datetime,
        end: datetime,
        *,
        employee_id: Optional[int] = None,
        branch_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[AttendanceSession]:
        """Completed sessions checked in during [start, end); `branch_ids` empty or None means all."""

        raise NotImplementedError

    def create_session(self, session: AttendanceSession) -> AttendanceSession:
        raise NotImplementedError

    def close_session(
        self,
        *,
        session_id: int,
        check_out: StampedInstant,
        check_out_coordinate: Optional[Coordinate],
        auto_closed: bool = False,
    ) -> bool:
        raise NotImplementedError
