"""Auto-closeout of sessions left open past their branch's closing time.

A session is eligible once its check-in's local calendar date is strictly
before "yesterday" in the branch's zone, so long same-day shifts are never
cut short. Re-running the sweep is a no-op for sessions it already closed
because they are no longer active.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence

from ..branches.model import Branch
from ..branches.repository import BranchRepository
from ..common.datetime_utils import Clock, SystemClock, local_date, to_utc
from ..core.constants import AUTO_CLOSE_FALLBACK_HOURS
from ..core.enums import SessionStatus
from ..employees.model import ScheduleOverride
from ..employees.repository import EmployeeRepository
from ..schedules.service import active_override, closing_at, resolve_effective_schedule
from .model import AttendanceSession, StampedInstant
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

BranchLookup = Callable[[int], Optional[Branch]]
OverrideLookup = Callable[[int, int], Optional[ScheduleOverride]]


@dataclass(frozen=True)
class SweepFailure:
    session_id: Optional[int]
    reason: str


@dataclass
class SweepResult:
    closed: List[AttendanceSession] = field(default_factory=list)
    skipped: List[Optional[int]] = field(default_factory=list)
    failures: List[SweepFailure] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "closed": len(self.closed),
            "skipped": len(self.skipped),
            "errors": len(self.failures),
            "closed_ids": [s.session_id for s in self.closed],
            "error_details": [f"{f.session_id}: {f.reason}" for f in self.failures],
        }


def is_stale(session: AttendanceSession, zone_name: str, now: datetime) -> bool:
    yesterday = local_date(now, zone_name) - timedelta(days=1)
    return local_date(session.check_in.instant, zone_name) < yesterday


def auto_close(
    session: AttendanceSession,
    branch: Branch,
    override: Optional[ScheduleOverride] = None,
) -> AttendanceSession:
    """Close `session` at the schedule's closing time on its check-in date."""
    schedule = resolve_effective_schedule(branch, override)
    check_in_day = local_date(session.check_in.instant, branch.timezone)
    closing = to_utc(closing_at(schedule, check_in_day, branch.timezone))

    if closing < session.check_in.instant:
        # Checked in after closing: keep the record sane rather than negative.
        closing = session.check_in.instant + timedelta(hours=AUTO_CLOSE_FALLBACK_HOURS)

    return replace(
        session,
        check_out=StampedInstant(instant=closing, zone=branch.timezone),
        check_out_coordinate=None,
        status=SessionStatus.COMPLETED,
        auto_closed=True,
    )


class AutoCloseSweep:
    """Pure sweep over a batch of sessions; persistence is left to the caller."""

    def run(
        self,
        open_sessions: Sequence[AttendanceSession],
        branch_lookup: BranchLookup,
        *,
        now: datetime,
        override_lookup: Optional[OverrideLookup] = None,
    ) -> SweepResult:
        result = SweepResult()
        for session in open_sessions:
            if not session.is_active:
                result.skipped.append(session.session_id)
                continue
            try:
                branch = branch_lookup(session.branch_id)
                if branch is None:
                    raise LookupError(f"branch {session.branch_id} not found")
                if not is_stale(session, branch.timezone, now):
                    result.skipped.append(session.session_id)
                    continue
                override = override_lookup(session.employee_id, session.branch_id) if override_lookup else None
                result.closed.append(auto_close(session, branch, override))
            except Exception as exc:
                logger.exception("Auto-close failed for session %s", session.session_id)
                result.failures.append(SweepFailure(session_id=session.session_id, reason=str(exc)))
        return result


class AutoCloseService:
    """Loads active sessions, runs the sweep and persists each closure independently."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        branches: BranchRepository,
        employees: EmployeeRepository,
        *,
        clock: Optional[Clock] = None,
        sweep: Optional[AutoCloseSweep] = None,
    ):
        self._attendance = attendance
        self._branches = branches
        self._employees = employees
        self._clock = clock or SystemClock()
        self._sweep = sweep or AutoCloseSweep()

    def _override_for(self, employee_id: int, branch_id: int) -> Optional[ScheduleOverride]:
        return active_override(self._employees, employee_id, branch_id)

    def run(self) -> SweepResult:
        now = self._clock.now()
        branch_cache: dict[int, Optional[Branch]] = {}

        def lookup(branch_id: int) -> Optional[Branch]:
            if branch_id not in branch_cache:
                branch_cache[branch_id] = self._branches.get_by_id(branch_id)
            return branch_cache[branch_id]

        planned = self._sweep.run(
            self._attendance.list_active(),
            lookup,
            now=now,
            override_lookup=self._override_for,
        )

        result = SweepResult(skipped=list(planned.skipped), failures=list(planned.failures))
        for session in planned.closed:
            try:
                updated = self._attendance.close_session(
                    session_id=session.session_id,
                    check_out=session.check_out,
                    check_out_coordinate=None,
                    auto_closed=True,
                )
            except Exception as exc:
                logger.exception("Could not persist auto-close for session %s", session.session_id)
                result.failures.append(SweepFailure(session_id=session.session_id, reason=str(exc)))
                continue
            if updated:
                result.closed.append(session)
            else:
                # Closed by a regular check-out since we read it.
                result.skipped.append(session.session_id)

        logger.info(
            "Auto-close sweep: closed=%d skipped=%d errors=%d",
            len(result.closed),
            len(result.skipped),
            len(result.failures),
        )
        return result
