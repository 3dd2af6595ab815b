from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..branches.model import Coordinate
from ..core.enums import SessionStatus
from ..core.exceptions import DuplicateSessionError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_db_datetime
from .model import AttendanceSession, StampedInstant
from .repository import AttendanceRepository

_COLUMNS = """
    session_id, employee_id, branch_id,
    check_in_time, check_in_timezone, check_in_latitude, check_in_longitude, is_late,
    check_out_time, check_out_timezone, check_out_latitude, check_out_longitude,
    status, is_auto_closed
"""


def _coordinate(lat: Any, lon: Any) -> Optional[Coordinate]:
    if lat is None or lon is None:
        return None
    return Coordinate(latitude=float(lat), longitude=float(lon))


def _to_session(r: Dict[str, Any]) -> AttendanceSession:
    check_out = None
    if r.get("check_out_time") is not None:
        check_out = StampedInstant(
            instant=r["check_out_time"],
            zone=r.get("check_out_timezone") or r["check_in_timezone"],
        )
    is_late = r.get("is_late")
    return AttendanceSession(
        session_id=int(r["session_id"]),
        employee_id=int(r["employee_id"]),
        branch_id=int(r["branch_id"]),
        check_in=StampedInstant(instant=r["check_in_time"], zone=r["check_in_timezone"]),
        check_in_coordinate=_coordinate(r.get("check_in_latitude"), r.get("check_in_longitude")),
        is_late=bool(is_late) if is_late is not None else None,
        status=SessionStatus(r["status"]),
        check_out=check_out,
        check_out_coordinate=_coordinate(r.get("check_out_latitude"), r.get("check_out_longitude")),
        auto_closed=bool(r.get("is_auto_closed")),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    """Sessions table. The unique key on `active_employee_id` makes the insert atomic."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_active_for_employee(self, employee_id: int) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_sessions WHERE employee_id=%s AND status='active'",
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def find_active_checked_in_between(
        self, employee_id: int, start: datetime, end: datetime
    ) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE employee_id=%s AND status='active'
                  AND check_in_time >= %s AND check_in_time < %s
                ORDER BY check_in_time DESC
                LIMIT 1
                """,
                (int(employee_id), to_db_datetime(start), to_db_datetime(end)),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def list_active(self) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_sessions WHERE status='active' ORDER BY check_in_time ASC"
            )
            return [_to_session(r) for r in fetchall(cur)]

    def list_completed_between(
        self,
        start: datetime,
        end: datetime,
        *,
        employee_id: Optional[int] = None,
        branch_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[AttendanceSession]:
        clauses = ["status='completed'", "check_in_time >= %s", "check_in_time < %s"]
        params: list[object] = [to_db_datetime(start), to_db_datetime(end)]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))
        if branch_ids:
            placeholders = ",".join(["%s"] * len(branch_ids))
            clauses.append(f"branch_id IN ({placeholders})")
            params.extend(int(b) for b in branch_ids)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_sessions WHERE {where} ORDER BY employee_id, check_in_time",
                tuple(params),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def create_session(self, session: AttendanceSession) -> AttendanceSession:
        coord = session.check_in_coordinate
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_sessions(
                        employee_id, branch_id, check_in_time, check_in_timezone,
                        check_in_latitude, check_in_longitude, is_late, status, is_auto_closed
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        session.employee_id,
                        session.branch_id,
                        to_db_datetime(session.check_in.instant),
                        session.check_in.zone,
                        coord.latitude if coord else None,
                        coord.longitude if coord else None,
                        None if session.is_late is None else int(session.is_late),
                        session.status.value,
                        int(session.auto_closed),
                    ),
                )
                session_id = int(cur.lastrowid)
        except IntegrityError as exc:
            if exc.errno == errorcode.ER_DUP_ENTRY:
                raise DuplicateSessionError("You already have an active check-in. Check out first.") from exc
            raise
        return replace(session, session_id=session_id)

    def close_session(
        self,
        *,
        session_id: int,
        check_out: StampedInstant,
        check_out_coordinate: Optional[Coordinate],
        auto_closed: bool = False,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET check_out_time=%s, check_out_timezone=%s,
                    check_out_latitude=%s, check_out_longitude=%s,
                    status='completed', is_auto_closed=%s
                WHERE session_id=%s AND status='active'
                """,
                (
                    to_db_datetime(check_out.instant),
                    check_out.zone,
                    check_out_coordinate.latitude if check_out_coordinate else None,
                    check_out_coordinate.longitude if check_out_coordinate else None,
                    int(auto_closed),
                    int(session_id),
                ),
            )
            return cur.rowcount > 0
