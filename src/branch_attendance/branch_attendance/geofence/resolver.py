from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from ..branches.model import Branch, Coordinate
from ..core.constants import EARTH_RADIUS_KM


@dataclass(frozen=True)
class GeofenceMatch:
    branch: Branch
    distance_meters: float


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two points given in decimal degrees."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c * 1000


def distance_to(branch: Branch, coordinate: Coordinate) -> float:
    return haversine_distance(
        coordinate.latitude,
        coordinate.longitude,
        branch.coordinate.latitude,
        branch.coordinate.longitude,
    )


def nearest_branch(coordinate: Coordinate, branches: Iterable[Branch]) -> Optional[GeofenceMatch]:
    """Closest branch regardless of radius (diagnostics only)."""
    best: Optional[GeofenceMatch] = None
    for branch in branches:
        d = distance_to(branch, coordinate)
        if best is None or d < best.distance_meters:
            best = GeofenceMatch(branch=branch, distance_meters=d)
    return best


def resolve_branch(coordinate: Coordinate, branches: Iterable[Branch]) -> Optional[GeofenceMatch]:
    """Closest branch whose tolerance radius contains `coordinate`.

    The radius boundary is inclusive. Ties keep the first branch encountered.
    Returns None when no branch matches.
    """
    best: Optional[GeofenceMatch] = None
    for branch in branches:
        d = distance_to(branch, coordinate)
        if d > branch.tolerance_radius_meters:
            continue
        if best is None or d < best.distance_meters:
            best = GeofenceMatch(branch=branch, distance_meters=d)
    return best
