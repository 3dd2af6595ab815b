from __future__ import annotations

from typing import Iterable, List, Mapping, Optional

from ..employees.model import Employee
from .model import DailyMetrics, DateRange, PeriodSummary, round_money


def summarize(
    employee_id: int,
    days: Iterable[DailyMetrics],
    date_range: DateRange,
    *,
    employee: Optional[Employee] = None,
) -> PeriodSummary:
    """Roll one employee's daily rows into a period summary.

    Inclusion is decided on `DailyMetrics.date`, the branch-local date of the
    check-in, never the UTC date.
    """
    included = [d for d in days if d.date in date_range]
    return PeriodSummary(
        employee_id=employee_id,
        employee_name=employee.full_name if employee else None,
        hourly_rate=round_money(employee.hourly_rate) if employee else None,
        start=date_range.start,
        end=date_range.end,
        days_worked=len(included),
        late_days=sum(1 for d in included if d.is_late),
        auto_closed_days=sum(1 for d in included if d.auto_closed),
        total_hours=round_money(sum(d.hours_worked for d in included)),
        total_regular_hours=round_money(sum(d.regular_hours for d in included)),
        total_late_minutes=sum(d.late_minutes for d in included),
        total_unpaid_minutes=sum(d.unpaid_minutes for d in included),
        total_overtime_hours=round_money(sum(d.overtime_hours for d in included)),
        total_base_payment=round_money(sum(d.base_payment for d in included)),
        total_late_deduction=round_money(sum(d.late_deduction for d in included)),
        total_payment_with_late=round_money(sum(d.payment_with_late for d in included)),
        total_overtime_payment=round_money(sum(d.overtime_payment for d in included)),
        total_payment=round_money(sum(d.total_payment for d in included)),
    )


def aggregate(
    daily_by_employee: Mapping[int, Iterable[DailyMetrics]],
    date_range: DateRange,
    employees: Optional[Mapping[int, Employee]] = None,
) -> List[PeriodSummary]:
    employees = employees or {}
    summaries = [
        summarize(employee_id, days, date_range, employee=employees.get(employee_id))
        for employee_id, days in daily_by_employee.items()
    ]
    summaries.sort(key=lambda s: s.employee_id)
    return summaries
