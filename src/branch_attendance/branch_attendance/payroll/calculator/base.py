from __future__ import annotations

from abc import ABC, abstractmethod

from ...attendance.model import AttendanceSession
from ...branches.model import Branch
from ...schedules.model import EffectiveSchedule
from ..model import DailyMetrics


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def daily_metrics(
        self,
        session: AttendanceSession,
        schedule: EffectiveSchedule,
        *,
        branch: Branch,
        hourly_rate: float,
    ) -> DailyMetrics:
        raise NotImplementedError
