from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, time
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..core.exceptions import ValidationError


def round_money(value: float) -> float:
    """Two decimals, half-up. Used for hours and money at the output boundary."""
    return float(Decimal(repr(float(value))).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def round_minutes(value: float) -> int:
    return int(Decimal(repr(float(value))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of local calendar dates."""

    start: date
    end: date

    def __post_init__(self):
        if self.end < self.start:
            raise ValidationError("Date range end must not be before start")

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class DailyMetrics:
    """Read-model: payroll breakdown of one completed session.

    Derived on demand; never the source of truth.
    """

    employee_id: int
    session_id: Optional[int]
    date: date
    check_in: str
    check_out: str
    hours_worked: float
    regular_hours: float
    late_minutes: int
    unpaid_minutes: int
    overtime_hours: float
    base_payment: float
    late_deduction: float
    payment_with_late: float
    overtime_payment: float
    total_payment: float
    is_late: bool
    auto_closed: bool
    branch_id: int
    branch_name: str
    schedule_start: time
    schedule_end: time
    tolerance_minutes: int

    def to_dict(self) -> dict:
        data = asdict(self)
        data["date"] = self.date.strftime("%Y-%m-%d")
        data["schedule_start"] = self.schedule_start.strftime("%H:%M")
        data["schedule_end"] = self.schedule_end.strftime("%H:%M")
        return data


@dataclass(frozen=True)
class PeriodSummary:
    employee_id: int
    employee_name: Optional[str]
    hourly_rate: Optional[float]
    start: date
    end: date
    days_worked: int
    late_days: int
    auto_closed_days: int
    total_hours: float
    total_regular_hours: float
    total_late_minutes: int
    total_unpaid_minutes: int
    total_overtime_hours: float
    total_base_payment: float
    total_late_deduction: float
    total_payment_with_late: float
    total_overtime_payment: float
    total_payment: float

    def to_dict(self) -> dict:
        data = asdict(self)
        data["start"] = self.start.strftime("%Y-%m-%d")
        data["end"] = self.end.strftime("%Y-%m-%d")
        return data
