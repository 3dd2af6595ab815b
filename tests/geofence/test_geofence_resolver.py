from __future__ import annotations

import pytest

from src.branch_attendance.branch_attendance.branches.model import Coordinate
from src.branch_attendance.branch_attendance.core.exceptions import ValidationError
from src.branch_attendance.branch_attendance.geofence.resolver import (
    haversine_distance,
    nearest_branch,
    resolve_branch,
)
from tests.fakes import CENTRO, ROMA, make_branch


def _north_of(origin: Coordinate, meters: float) -> Coordinate:
    # One degree of latitude is ~111.195 km on a 6371 km sphere.
    return Coordinate(latitude=origin.latitude + meters / 111_194.93, longitude=origin.longitude)


def test_distance_is_zero_for_identical_points():
    assert haversine_distance(19.4326, -99.1332, 19.4326, -99.1332) == 0.0


@pytest.mark.parametrize(
    "a, b",
    [
        ((19.4326, -99.1332), (19.4150, -99.1650)),
        ((-33.8688, 151.2093), (51.5074, -0.1278)),
        ((0.0, 179.9), (0.0, -179.9)),
    ],
)
def test_distance_is_symmetric(a, b):
    assert haversine_distance(*a, *b) == pytest.approx(haversine_distance(*b, *a))


def test_one_degree_of_latitude_is_about_111_km():
    assert haversine_distance(0, 0, 1, 0) == pytest.approx(111_194.93, rel=1e-6)


def test_resolve_picks_closest_matching_branch():
    far = make_branch(1, coordinate=_north_of(CENTRO, 80))
    near = make_branch(2, coordinate=_north_of(CENTRO, 20))

    match = resolve_branch(CENTRO, [far, near])

    assert match is not None
    assert match.branch.branch_id == 2
    assert match.distance_meters == pytest.approx(20, abs=0.5)


def test_resolve_ignores_closer_branch_outside_its_radius():
    tight = make_branch(1, coordinate=_north_of(CENTRO, 30), tolerance_radius_meters=10)
    loose = make_branch(2, coordinate=_north_of(CENTRO, 150), tolerance_radius_meters=200)

    match = resolve_branch(CENTRO, [tight, loose])

    assert match.branch.branch_id == 2
    assert match.distance_meters <= match.branch.tolerance_radius_meters


def test_radius_boundary_is_inclusive():
    spot = _north_of(CENTRO, 50)
    exact = haversine_distance(spot.latitude, spot.longitude, CENTRO.latitude, CENTRO.longitude)
    branch = make_branch(1, tolerance_radius_meters=exact)

    assert resolve_branch(spot, [branch]) is not None


def test_tie_keeps_first_branch():
    a = make_branch(1)
    b = make_branch(2)

    assert resolve_branch(CENTRO, [a, b]).branch.branch_id == 1
    assert resolve_branch(CENTRO, [b, a]).branch.branch_id == 2


def test_no_match_returns_none_but_nearest_is_reported():
    centro = make_branch(1)
    branches = [centro, make_branch(2, coordinate=_north_of(CENTRO, 20_000))]

    assert resolve_branch(ROMA, branches) is None
    nearest = nearest_branch(ROMA, branches)
    assert nearest.branch.branch_id == 1
    assert nearest.distance_meters > 1000


@pytest.mark.parametrize("lat, lon", [(90.1, 0), (-91, 0), (0, 180.5), (0, -181), ("abc", 0), (None, 0)])
def test_coordinate_rejects_out_of_range(lat, lon):
    with pytest.raises(ValidationError):
        Coordinate(latitude=lat, longitude=lon)


@pytest.mark.parametrize("radius", [5, 201])
def test_branch_radius_must_be_between_10_and_200(radius):
    with pytest.raises(ValidationError):
        make_branch(1, tolerance_radius_meters=radius)
