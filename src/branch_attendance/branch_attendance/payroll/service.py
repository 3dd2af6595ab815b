from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from typing import Dict, List, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..branches.model import Branch
from ..branches.repository import BranchRepository
from ..core.exceptions import ScheduleConfigError, ValidationError
from ..employees.model import Employee, ScheduleOverride
from ..employees.repository import EmployeeRepository
from ..schedules.service import active_override, resolve_effective_schedule
from .aggregator import aggregate
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import DailyMetrics, DateRange, PeriodSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportData:
    rows: List[DailyMetrics]
    summary: List[PeriodSummary]

    def to_dict(self) -> dict:
        return {
            "rows": [r.to_dict() for r in self.rows],
            "summary": [s.to_dict() for s in self.summary],
        }


class PayrollReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        branches: BranchRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._branches = branches
        self._calculator = calculator or StandardPayrollCalculator()

    def build_period_report(
        self,
        date_range: DateRange,
        *,
        employee_id: Optional[int] = None,
        branch_ids: Optional[Sequence[int]] = None,
    ) -> ReportData:
        # Local dates can sit up to a day away from UTC, so over-fetch and filter locally.
        start = datetime.combine(date_range.start - timedelta(days=1), time.min, tzinfo=timezone.utc)
        end = datetime.combine(date_range.end + timedelta(days=2), time.min, tzinfo=timezone.utc)
        sessions = self._attendance.list_completed_between(
            start, end, employee_id=employee_id, branch_ids=list(branch_ids) if branch_ids else None
        )

        branches: Dict[int, Optional[Branch]] = {}
        employees: Dict[int, Optional[Employee]] = {}
        overrides: Dict[tuple, Optional[ScheduleOverride]] = {}

        by_employee: Dict[int, List[DailyMetrics]] = {}
        rows: List[DailyMetrics] = []

        for s in sessions:
            if s.branch_id not in branches:
                branches[s.branch_id] = self._branches.get_by_id(s.branch_id)
            if s.employee_id not in employees:
                employees[s.employee_id] = self._employees.get_by_id(s.employee_id)

            branch = branches[s.branch_id]
            employee = employees[s.employee_id]
            if branch is None or employee is None:
                logger.warning("Skipping session %s: branch or employee missing", s.session_id)
                continue

            key = (s.employee_id, s.branch_id)
            if key not in overrides:
                overrides[key] = active_override(self._employees, s.employee_id, s.branch_id)

            try:
                schedule = resolve_effective_schedule(branch, overrides[key])
                metrics = self._calculator.daily_metrics(s, schedule, branch=branch, hourly_rate=employee.hourly_rate)
            except (ScheduleConfigError, ValidationError) as exc:
                logger.warning("Skipping session %s: %s", s.session_id, exc)
                continue
            if metrics.date not in date_range:
                continue

            rows.append(metrics)
            by_employee.setdefault(s.employee_id, []).append(metrics)

        rows.sort(key=lambda r: (r.employee_id, r.date, r.check_in))
        known = {i: e for i, e in employees.items() if e is not None}
        return ReportData(rows=rows, summary=aggregate(by_employee, date_range, known))
