from __future__ import annotations

from datetime import time, timedelta

from src.branch_attendance.branch_attendance.attendance.auto_close import (
    AutoCloseService,
    AutoCloseSweep,
    auto_close,
    is_stale,
)
from src.branch_attendance.branch_attendance.common.datetime_utils import FixedClock
from src.branch_attendance.branch_attendance.core.enums import AssignmentStatus, SessionStatus
from src.branch_attendance.branch_attendance.employees.model import ScheduleOverride
from tests.fakes import (
    MEXICO_CITY,
    InMemoryAttendance,
    InMemoryBranches,
    InMemoryEmployees,
    local,
    make_branch,
    make_employee,
    make_session,
)

NOW = local(2025, 3, 12, 9, 0)


def _service(attendance, branches, employees=None):
    return AutoCloseService(
        attendance,
        branches,
        employees or InMemoryEmployees(),
        clock=FixedClock(NOW),
    )


def test_stale_session_closes_at_branch_closing_time():
    attendance = InMemoryAttendance()
    branches = InMemoryBranches()
    branches.add(make_branch(1))
    attendance.add(make_session(session_id=1, check_in=local(2025, 3, 10, 8, 5)))

    result = _service(attendance, branches).run()

    closed = attendance.sessions[1]
    assert [s.session_id for s in result.closed] == [1]
    assert closed.status == SessionStatus.COMPLETED
    assert closed.auto_closed is True
    assert closed.check_out_coordinate is None
    assert closed.check_out.local == local(2025, 3, 10, 18, 0)
    assert closed.check_out.zone == MEXICO_CITY


def test_yesterday_and_today_stay_open():
    attendance = InMemoryAttendance()
    branches = InMemoryBranches()
    branches.add(make_branch(1))
    attendance.add(make_session(session_id=1, employee_id=1, check_in=local(2025, 3, 11, 22, 0)))
    attendance.add(make_session(session_id=2, employee_id=2, check_in=local(2025, 3, 12, 7, 55)))

    result = _service(attendance, branches).run()

    assert result.closed == []
    assert sorted(result.skipped) == [1, 2]
    assert attendance.active_count(1) == 1
    assert attendance.active_count(2) == 1


def test_rerun_is_a_no_op():
    attendance = InMemoryAttendance()
    branches = InMemoryBranches()
    branches.add(make_branch(1))
    attendance.add(make_session(session_id=1, check_in=local(2025, 3, 9, 8, 0)))
    service = _service(attendance, branches)

    first = service.run()
    snapshot = dict(attendance.sessions)
    second = service.run()

    assert len(first.closed) == 1
    assert second.closed == [] and second.failures == []
    assert attendance.sessions == snapshot


def test_missing_branch_does_not_stop_the_sweep():
    attendance = InMemoryAttendance()
    branches = InMemoryBranches()
    branches.add(make_branch(1))
    attendance.add(make_session(session_id=1, employee_id=1, branch_id=99, check_in=local(2025, 3, 9, 8, 0)))
    attendance.add(make_session(session_id=2, employee_id=2, branch_id=1, check_in=local(2025, 3, 9, 8, 0)))

    result = _service(attendance, branches).run()

    assert [s.session_id for s in result.closed] == [2]
    assert [f.session_id for f in result.failures] == [1]
    assert attendance.sessions[1].is_active
    assert result.as_dict()["errors"] == 1


def test_branch_without_hours_is_reported_as_failure():
    attendance = InMemoryAttendance()
    branches = InMemoryBranches()
    branches.add(make_branch(1, business_hours_start=None, business_hours_end=None))
    attendance.add(make_session(session_id=1, check_in=local(2025, 3, 9, 8, 0)))

    result = _service(attendance, branches).run()

    assert result.closed == []
    assert len(result.failures) == 1


def test_employee_override_sets_closing_time():
    attendance = InMemoryAttendance()
    branches = InMemoryBranches()
    employees = InMemoryEmployees()
    branches.add(make_branch(1))
    employees.add(make_employee(1))
    employees.assign(1, 1, schedule=ScheduleOverride(start_time=time(6), end_time=time(14), tolerance_minutes=5))
    attendance.add(make_session(session_id=1, check_in=local(2025, 3, 10, 6, 0)))

    _service(attendance, branches, employees).run()

    assert attendance.sessions[1].check_out.local == local(2025, 3, 10, 14, 0)


def test_override_on_inactive_assignment_is_ignored():
    attendance = InMemoryAttendance()
    branches = InMemoryBranches()
    employees = InMemoryEmployees()
    branches.add(make_branch(1))
    employees.assign(
        1,
        1,
        status=AssignmentStatus.INACTIVE,
        schedule=ScheduleOverride(start_time=time(6), end_time=time(14), tolerance_minutes=5),
    )
    attendance.add(make_session(session_id=1, check_in=local(2025, 3, 10, 6, 0)))

    _service(attendance, branches, employees).run()

    assert attendance.sessions[1].check_out.local == local(2025, 3, 10, 18, 0)


def test_overnight_schedule_closes_next_morning():
    branch = make_branch(1, business_hours_start=time(22), business_hours_end=time(6))
    session = make_session(check_in=local(2025, 3, 9, 22, 0))

    closed = auto_close(session, branch)

    assert closed.check_out.local == local(2025, 3, 10, 6, 0)


def test_check_in_after_closing_falls_back_to_one_hour():
    branch = make_branch(1)
    session = make_session(check_in=local(2025, 3, 9, 19, 30))

    closed = auto_close(session, branch)

    assert closed.check_out.instant - closed.check_in.instant == timedelta(hours=1)
    assert closed.auto_closed is True


def test_sweep_skips_completed_sessions():
    branch = make_branch(1)
    done = make_session(session_id=4, check_in=local(2025, 3, 9, 8, 0), check_out=local(2025, 3, 9, 16, 0))

    result = AutoCloseSweep().run([done], lambda _id: branch, now=NOW)

    assert result.closed == []
    assert result.skipped == [4]


def test_staleness_is_judged_in_branch_zone():
    # 19:00 local on the 10th is already the 11th in UTC.
    session = make_session(check_in=local(2025, 3, 10, 19, 0))
    now = local(2025, 3, 12, 0, 30)

    assert is_stale(session, MEXICO_CITY, now) is True
    assert is_stale(session, "UTC", now) is False
