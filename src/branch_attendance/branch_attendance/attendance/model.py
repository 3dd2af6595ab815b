from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..branches.model import Coordinate
from ..common.datetime_utils import get_zone, to_utc
from ..core.enums import SessionStatus


@dataclass(frozen=True)
class StampedInstant:
    """An instant plus the IANA zone it was captured in.

    `instant` is always held in UTC; `local` gives the wall clock of `zone`
    with the offset that applied at that instant.
    """

    instant: datetime
    zone: str

    def __post_init__(self):
        get_zone(self.zone)
        object.__setattr__(self, "instant", to_utc(self.instant))

    @property
    def local(self) -> datetime:
        return self.instant.astimezone(get_zone(self.zone))

    @property
    def local_date(self) -> date:
        return self.local.date()

    def isoformat(self) -> str:
        return self.local.isoformat()


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: one check-in/check-out cycle at a branch."""

    session_id: Optional[int]
    employee_id: int
    branch_id: int
    check_in: StampedInstant
    check_in_coordinate: Optional[Coordinate]
    is_late: Optional[bool]
    status: SessionStatus = SessionStatus.ACTIVE
    check_out: Optional[StampedInstant] = None
    check_out_coordinate: Optional[Coordinate] = None
    auto_closed: bool = False

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    @property
    def has_check_in(self) -> bool:
        return self.check_in is not None and self.check_in_coordinate is not None

    @property
    def has_check_out(self) -> bool:
        return self.check_out is not None
