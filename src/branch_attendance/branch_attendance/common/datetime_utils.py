from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Protocol, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import ValidationError


class Clock(Protocol):
    """Source of "now". Injected so lateness and sweep boundaries are testable."""

    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


@dataclass
class FixedClock:
    """Clock frozen at a given aware instant. Call `advance` to move it."""

    current: datetime

    def __post_init__(self):
        self.current = ensure_aware(self.current)

    def now(self) -> datetime:
        return self.current

    def advance(self, **delta) -> None:
        self.current = self.current + timedelta(**delta)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc


def parse_wall_time(value) -> time:
    """Parse a local wall-clock `HH:MM[:SS]` string (or pass a `time` through)."""
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"Invalid time value {value!r}")
    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise ValidationError(f"Invalid time {value!r}, expected HH:MM[:SS]")
    hours, minutes = int(parts[0]), int(parts[1])
    seconds = int(parts[2]) if len(parts) == 3 else 0
    if not (0 <= hours <= 23 and 0 <= minutes <= 59 and 0 <= seconds <= 59):
        raise ValidationError(f"Time out of range: {value!r}")
    return time(hours, minutes, seconds)


def get_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, TypeError) as exc:
        raise ValidationError(f"Unknown timezone {name!r}") from exc


def ensure_aware(value: datetime) -> datetime:
    """Naive datetimes are treated as UTC (that is how they are stored)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_utc(value: datetime) -> datetime:
    return ensure_aware(value).astimezone(timezone.utc)


def local_date(instant: datetime, zone_name: str) -> date:
    return to_utc(instant).astimezone(get_zone(zone_name)).date()


def at_local_time(day: date, wall: time, zone_name: str) -> datetime:
    """Aware datetime for `wall` on `day` in the given zone (DST-aware)."""
    return datetime.combine(day, wall, tzinfo=get_zone(zone_name))


def day_bounds_utc(day: date, zone_name: str) -> Tuple[datetime, datetime]:
    """UTC [start, end) of a local calendar day."""
    zone = get_zone(zone_name)
    start = datetime.combine(day, time.min, tzinfo=zone)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=zone)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)
