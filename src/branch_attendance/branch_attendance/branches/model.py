from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..common.datetime_utils import get_zone
from ..common.validators import require_in_range, require_non_empty, require_number
from ..core.constants import MAX_TOLERANCE_RADIUS_METERS, MIN_TOLERANCE_RADIUS_METERS
from ..core.enums import BranchStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Coordinate:
    """A reported or registered position, in decimal degrees."""

    latitude: float
    longitude: float

    def __post_init__(self):
        lat = require_in_range(require_number(self.latitude, "latitude"), "latitude", -90, 90)
        lon = require_in_range(require_number(self.longitude, "longitude"), "longitude", -180, 180)
        object.__setattr__(self, "latitude", lat)
        object.__setattr__(self, "longitude", lon)


@dataclass(frozen=True)
class Branch:
    """Domain entity: a physical branch of a business.

    Business hours are local wall-clock times in `timezone`.
    """

    branch_id: int
    business_id: int
    name: str
    coordinate: Coordinate
    tolerance_radius_meters: float
    timezone: str
    business_hours_start: Optional[time] = None
    business_hours_end: Optional[time] = None
    tolerance_minutes: int = 0
    status: BranchStatus = BranchStatus.ACTIVE

    def __post_init__(self):
        require_non_empty(self.name, "Branch name")
        radius = require_number(self.tolerance_radius_meters, "tolerance_radius_meters")
        require_in_range(radius, "tolerance_radius_meters", MIN_TOLERANCE_RADIUS_METERS, MAX_TOLERANCE_RADIUS_METERS)
        get_zone(self.timezone)
        if int(self.tolerance_minutes) < 0:
            raise ValidationError("tolerance_minutes must not be negative")
        if (self.business_hours_start is None) != (self.business_hours_end is None):
            raise ValidationError("Business hours need both start and end")

    @property
    def is_active(self) -> bool:
        return self.status == BranchStatus.ACTIVE

    @property
    def has_business_hours(self) -> bool:
        return self.business_hours_start is not None and self.business_hours_end is not None
