from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import BranchStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Branch, Coordinate
from .repository import BranchRepository

_COLUMNS = """
    branch_id, business_id, name, latitude, longitude, tolerance_radius_meters, timezone,
    business_hours_start, business_hours_end, tolerance_minutes, status
"""


def _to_branch(r: Dict[str, Any]) -> Branch:
    return Branch(
        branch_id=int(r["branch_id"]),
        business_id=int(r["business_id"]),
        name=r["name"],
        coordinate=Coordinate(latitude=float(r["latitude"]), longitude=float(r["longitude"])),
        tolerance_radius_meters=float(r["tolerance_radius_meters"]),
        timezone=r["timezone"],
        business_hours_start=normalize_mysql_time(r.get("business_hours_start")),
        business_hours_end=normalize_mysql_time(r.get("business_hours_end")),
        tolerance_minutes=int(r.get("tolerance_minutes") or 0),
        status=BranchStatus(r["status"]),
    )


class MySQLBranchRepository(BranchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, branch_id: int) -> Optional[Branch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM branches WHERE branch_id=%s", (int(branch_id),))
            r = fetchone(cur)
            return _to_branch(r) if r else None

    def list_by_ids(self, branch_ids: Sequence[int]) -> Sequence[Branch]:
        ids = [int(i) for i in branch_ids]
        if not ids:
            return []
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM branches WHERE branch_id IN ({placeholders})", tuple(ids))
            by_id = {int(r["branch_id"]): _to_branch(r) for r in fetchall(cur)}
        return [by_id[i] for i in ids if i in by_id]
