from __future__ import annotations

from typing import Optional

from ..core.enums import AttendanceAction
from .model import AttendanceSession


def determine_action(
    today_session: Optional[AttendanceSession],
    requested: Optional[AttendanceAction] = None,
) -> AttendanceAction:
    """Decide whether a reading is a check-in or a check-out.

    An explicit `requested` action always wins; the check-in/check-out
    transactions still enforce their own preconditions.
    """
    if requested is not None:
        return AttendanceAction(requested)
    if today_session is None:
        return AttendanceAction.CHECK_IN
    if not today_session.has_check_in:
        return AttendanceAction.CHECK_IN
    if not today_session.has_check_out:
        return AttendanceAction.CHECK_OUT
    # Closed cycle: the next reading starts a new one.
    return AttendanceAction.CHECK_IN
