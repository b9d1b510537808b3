from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import WEEKLY_REQUIRED_DAYS, WEEKLY_TOTAL_DAYS
from ..core.enums import DayStatus, WeeklyStatus


@dataclass(frozen=True)
class DayBreakdown:
    day: str
    date: str
    status: DayStatus


@dataclass(frozen=True)
class WeeklyWindow:
    """Read-model: Mon-Fri compliance window, recomputed on every query."""

    days_present: int
    status: WeeklyStatus
    remaining: int
    breakdown: tuple[DayBreakdown, ...]
    days_required: int = WEEKLY_REQUIRED_DAYS
    total_days: int = WEEKLY_TOTAL_DAYS

    def to_dict(self) -> dict:
        return {
            "weeklyData": {
                "daysPresent": self.days_present,
                "daysRequired": self.days_required,
                "totalDays": self.total_days,
                "status": self.status.value,
                "remaining": self.remaining,
            },
            "weeklyBreakdown": [
                {"day": d.day, "date": d.date, "status": d.status.value} for d in self.breakdown
            ],
        }
