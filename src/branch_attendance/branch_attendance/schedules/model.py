from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..core.enums import ScheduleSource


@dataclass(frozen=True)
class EffectiveSchedule:
    """The schedule that applies to one employee at one branch."""

    start_time: time
    end_time: time
    tolerance_minutes: int
    source: ScheduleSource

    @property
    def closes_next_day(self) -> bool:
        return self.end_time < self.start_time
