from __future__ import annotations

from dataclasses import replace

import pytest

from src.branch_attendance.branch_attendance.attendance.factory import determine_action
from src.branch_attendance.branch_attendance.core.enums import AttendanceAction
from tests.fakes import local, make_session


def test_no_session_means_check_in():
    assert determine_action(None) == AttendanceAction.CHECK_IN


def test_session_without_check_in_coordinates_means_check_in():
    session = replace(make_session(check_in=local(2025, 3, 10, 8)), check_in_coordinate=None)

    assert determine_action(session) == AttendanceAction.CHECK_IN


def test_open_session_means_check_out():
    assert determine_action(make_session(check_in=local(2025, 3, 10, 8))) == AttendanceAction.CHECK_OUT


def test_closed_session_starts_a_new_cycle():
    session = make_session(check_in=local(2025, 3, 10, 8), check_out=local(2025, 3, 10, 16))

    assert determine_action(session) == AttendanceAction.CHECK_IN


@pytest.mark.parametrize("requested", [AttendanceAction.CHECK_IN, AttendanceAction.CHECK_OUT])
def test_explicit_action_overrides(requested):
    open_session = make_session(check_in=local(2025, 3, 10, 8))

    assert determine_action(open_session, requested) == requested
    assert determine_action(None, requested) == requested
