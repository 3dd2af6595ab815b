from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import AssignmentStatus, EmployeeStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Employee, EmployeeBranchAssignment, ScheduleOverride
from .repository import EmployeeRepository


def _to_employee(r: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        business_id=int(r["business_id"]),
        full_name=r["full_name"],
        phone=r["phone"],
        hourly_rate=float(r["hourly_rate"]),
        status=EmployeeStatus(r["status"]),
    )


def _to_assignment(r: Dict[str, Any]) -> EmployeeBranchAssignment:
    start = normalize_mysql_time(r.get("employees_hours_start"))
    end = normalize_mysql_time(r.get("employees_hours_end"))
    tolerance = r.get("tolerance_minutes")
    schedule = None
    if start is not None or end is not None or tolerance is not None:
        schedule = ScheduleOverride(
            start_time=start,
            end_time=end,
            tolerance_minutes=int(tolerance) if tolerance is not None else None,
        )
    return EmployeeBranchAssignment(
        employee_id=int(r["employee_id"]),
        branch_id=int(r["branch_id"]),
        status=AssignmentStatus(r["status"]),
        schedule=schedule,
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, business_id, full_name, phone, hourly_rate, status
                FROM employees
                WHERE employee_id=%s
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_phone(self, phone: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, business_id, full_name, phone, hourly_rate, status
                FROM employees
                WHERE phone=%s
                """,
                (phone,),
            )
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_assignments(self, employee_id: int) -> Sequence[EmployeeBranchAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, branch_id, status, employees_hours_start, employees_hours_end, tolerance_minutes
                FROM employee_branches
                WHERE employee_id=%s
                ORDER BY branch_id ASC
                """,
                (int(employee_id),),
            )
            return [_to_assignment(r) for r in fetchall(cur)]

    def get_assignment(self, *, employee_id: int, branch_id: int) -> Optional[EmployeeBranchAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, branch_id, status, employees_hours_start, employees_hours_end, tolerance_minutes
                FROM employee_branches
                WHERE employee_id=%s AND branch_id=%s
                """,
                (int(employee_id), int(branch_id)),
            )
            r = fetchone(cur)
            return _to_assignment(r) if r else None
