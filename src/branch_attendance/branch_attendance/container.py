from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.auto_close import AutoCloseService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .branches.mysql_branch_repository import MySQLBranchRepository
from .branches.repository import BranchRepository
from .common.datetime_utils import Clock, SystemClock
from .core.constants import DEFAULT_TIMEZONE
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .payroll.service import PayrollReportService


@dataclass(frozen=True)
class Container:
    branches_repo: BranchRepository
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository

    attendance_service: AttendanceService
    auto_close_service: AutoCloseService
    payroll_report_service: PayrollReportService


def wire(
    *,
    branches_repo: BranchRepository,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    clock: Optional[Clock] = None,
    default_timezone: str = DEFAULT_TIMEZONE,
) -> Container:
    clock = clock or SystemClock()
    return Container(
        branches_repo=branches_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        attendance_service=AttendanceService(
            attendance_repo,
            employees_repo,
            branches_repo,
            clock=clock,
            default_timezone=default_timezone,
        ),
        auto_close_service=AutoCloseService(attendance_repo, branches_repo, employees_repo, clock=clock),
        payroll_report_service=PayrollReportService(attendance_repo, employees_repo, branches_repo),
    )


def build_container(*, db_config: dict, default_timezone: str = DEFAULT_TIMEZONE) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    return wire(
        branches_repo=MySQLBranchRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        default_timezone=default_timezone,
    )
