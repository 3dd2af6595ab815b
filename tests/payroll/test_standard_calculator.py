from datetime import date, time

import pytest

from src.branch_attendance.branch_attendance.core.exceptions import ValidationError
from src.branch_attendance.branch_attendance.payroll.calculator.standard_calculator import StandardPayrollCalculator
from src.branch_attendance.branch_attendance.schedules.service import resolve_effective_schedule
from tests.fakes import local, make_branch, make_session


def _metrics(session, branch=None, rate=100.0):
    branch = branch or make_branch(1)
    schedule = resolve_effective_schedule(branch)
    return StandardPayrollCalculator().daily_metrics(session, schedule, branch=branch, hourly_rate=rate)


def test_late_check_in_deducts_minutes_past_tolerance():
    session = make_session(check_in=local(2025, 3, 10, 8, 12), check_out=local(2025, 3, 10, 16, 12), is_late=True)

    m = _metrics(session)

    assert m.hours_worked == 8.0
    assert m.regular_hours == 8.0
    assert m.late_minutes == 2
    assert m.unpaid_minutes == 2
    assert m.overtime_hours == 0.0
    assert m.base_payment == 800.0
    assert m.late_deduction == 3.33
    assert m.payment_with_late == 796.67
    assert m.total_payment == 800.0
    assert m.is_late is True
    assert m.check_in == "08:12"
    assert m.check_out == "16:12"


def test_overtime_is_reported_apart_from_total():
    session = make_session(check_in=local(2025, 3, 10, 8, 0), check_out=local(2025, 3, 10, 18, 30), is_late=False)

    m = _metrics(session)

    assert m.hours_worked == 10.5
    assert m.regular_hours == 8.0
    assert m.overtime_hours == 2.5
    assert m.overtime_payment == 250.0
    assert m.total_payment == 800.0
    assert m.late_minutes == 0


def test_short_day_pays_hours_worked():
    session = make_session(check_in=local(2025, 3, 10, 8, 0), check_out=local(2025, 3, 10, 12, 0))

    m = _metrics(session, rate=75.5)

    assert m.regular_hours == 4.0
    assert m.total_payment == 302.0
    assert m.base_payment == 604.0


def test_stored_lateness_wins_over_recomputed():
    # Schedule changed after the fact: the flag stamped at check-in stays.
    session = make_session(check_in=local(2025, 3, 10, 8, 5), check_out=local(2025, 3, 10, 16, 5), is_late=True)

    m = _metrics(session)

    assert m.late_minutes == 0
    assert m.is_late is True


def test_lateness_recomputed_when_not_stored():
    session = make_session(check_in=local(2025, 3, 10, 8, 30), check_out=local(2025, 3, 10, 16, 30))

    m = _metrics(session)

    assert m.is_late is True
    assert m.late_minutes == 20


def test_payment_with_late_never_negative():
    session = make_session(check_in=local(2025, 3, 10, 17, 0), check_out=local(2025, 3, 10, 17, 30))

    m = _metrics(session)

    assert m.payment_with_late == 0.0
    assert m.late_deduction > 0


def test_date_is_branch_local():
    # 23:30 local is 05:30 UTC the next day.
    branch = make_branch(1, business_hours_start=time(22, 0), business_hours_end=time(6, 0))
    session = make_session(check_in=local(2025, 3, 10, 23, 30), check_out=local(2025, 3, 11, 5, 30))

    m = _metrics(session, branch=branch)

    assert m.date == date(2025, 3, 10)
    assert m.hours_worked == 6.0
    assert m.schedule_start == time(22, 0)
    assert m.to_dict()["date"] == "2025-03-10"
    assert m.to_dict()["schedule_end"] == "06:00"


def test_open_session_is_rejected():
    session = make_session(check_in=local(2025, 3, 10, 8, 0))

    with pytest.raises(ValidationError):
        _metrics(session)


def test_custom_workday_length():
    branch = make_branch(1)
    session = make_session(check_in=local(2025, 3, 10, 8, 0), check_out=local(2025, 3, 10, 16, 0))
    calc = StandardPayrollCalculator(workday_hours=6)

    m = calc.daily_metrics(session, resolve_effective_schedule(branch), branch=branch, hourly_rate=100)

    assert m.overtime_hours == 2.0
    assert m.total_payment == 600.0
