from __future__ import annotations

from ...attendance.model import AttendanceSession
from ...branches.model import Branch
from ...common.datetime_utils import get_zone, to_utc
from ...core.constants import STANDARD_WORKDAY_HOURS
from ...core.exceptions import ValidationError
from ...schedules.model import EffectiveSchedule
from ...schedules.service import allowed_start_at
from ..model import DailyMetrics, round_minutes, round_money
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: 8h regular day, late time unpaid, overtime reported apart.

    `total_payment` pays the regular portion only. `payment_with_late` is the
    late-adjusted figure and `overtime_payment` is never added to the total;
    callers decide which figure to pay.
    """

    def __init__(self, *, workday_hours: float = STANDARD_WORKDAY_HOURS):
        self._workday_hours = float(workday_hours)

    def daily_metrics(
        self,
        session: AttendanceSession,
        schedule: EffectiveSchedule,
        *,
        branch: Branch,
        hourly_rate: float,
    ) -> DailyMetrics:
        if session.check_out is None:
            raise ValidationError("Session is still open")

        zone = get_zone(branch.timezone)
        check_in = session.check_in.instant.astimezone(zone)
        check_out = session.check_out.instant.astimezone(zone)
        if check_out < check_in:
            raise ValidationError("Check-out precedes check-in")

        hours_worked = (check_out - check_in).total_seconds() / 3600

        allowed = allowed_start_at(schedule, check_in.date(), branch.timezone)
        late_seconds = max(0.0, (to_utc(check_in) - to_utc(allowed)).total_seconds())
        late_minutes = late_seconds / 60
        unpaid_minutes = late_minutes

        overtime_hours = max(0.0, hours_worked - self._workday_hours)
        regular_hours = min(hours_worked, self._workday_hours)

        rate = float(hourly_rate)
        base_payment = rate * self._workday_hours
        late_deduction = rate * (unpaid_minutes / 60)
        payment_with_late = rate * max(0.0, hours_worked - unpaid_minutes / 60)
        overtime_payment = rate * overtime_hours
        total_payment = rate * regular_hours

        is_late = session.is_late if session.is_late is not None else late_seconds > 0

        return DailyMetrics(
            employee_id=session.employee_id,
            session_id=session.session_id,
            date=check_in.date(),
            check_in=check_in.strftime("%H:%M"),
            check_out=check_out.strftime("%H:%M"),
            hours_worked=round_money(hours_worked),
            regular_hours=round_money(regular_hours),
            late_minutes=round_minutes(late_minutes),
            unpaid_minutes=round_minutes(unpaid_minutes),
            overtime_hours=round_money(overtime_hours),
            base_payment=round_money(base_payment),
            late_deduction=round_money(late_deduction),
            payment_with_late=round_money(payment_with_late),
            overtime_payment=round_money(overtime_payment),
            total_payment=round_money(total_payment),
            is_late=bool(is_late),
            auto_closed=session.auto_closed,
            branch_id=branch.branch_id,
            branch_name=branch.name,
            schedule_start=schedule.start_time,
            schedule_end=schedule.end_time,
            tolerance_minutes=schedule.tolerance_minutes,
        )
