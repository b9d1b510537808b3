from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Mapping

from ..common.datetime_utils import format_calendar_date, week_start
from ..core.constants import WEEKLY_REQUIRED_DAYS, WEEKLY_TOTAL_DAYS
from ..core.enums import DayStatus, StatusCode, WeeklyStatus
from .model import DayBreakdown, WeeklyWindow

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def week_dates(reference: date, *, total_days: int = WEEKLY_TOTAL_DAYS) -> list[date]:
    monday = week_start(reference)
    return [monday + timedelta(days=i) for i in range(total_days)]


def _reference_day(reference_now: datetime | date) -> date:
    if isinstance(reference_now, datetime):
        if reference_now.tzinfo is None:
            raise ValueError("reference_now must be timezone-aware")
        return reference_now.date()
    return reference_now


def count_present_this_week(
    grid: Mapping[str, str],
    reference_now: datetime | date,
    *,
    total_days: int = WEEKLY_TOTAL_DAYS,
) -> int:
    """PRESENT entries only, Mon-Fri of the reference week."""
    today = _reference_day(reference_now)
    return sum(
        1
        for d in week_dates(today, total_days=total_days)
        if StatusCode.from_cell(grid.get(format_calendar_date(d))) == StatusCode.PRESENT
    )


def compute_weekly_window(
    grid: Mapping[str, str],
    reference_now: datetime | date,
    *,
    days_required: int = WEEKLY_REQUIRED_DAYS,
    total_days: int = WEEKLY_TOTAL_DAYS,
) -> WeeklyWindow:
    """Current week's attendance against the compulsory minimum.

    Each week stands alone: nothing carries over from or into other weeks.
    """
    today = _reference_day(reference_now)
    present = 0
    breakdown: list[DayBreakdown] = []

    for d in week_dates(today, total_days=total_days):
        key = format_calendar_date(d)
        if d > today:
            status = DayStatus.FUTURE
        else:
            code = StatusCode.from_cell(grid.get(key))
            status = DayStatus.from_status_code(code)
            if code == StatusCode.PRESENT:
                present += 1

        breakdown.append(DayBreakdown(day=DAY_NAMES[d.weekday()], date=key, status=status))

    return WeeklyWindow(
        days_present=present,
        status=WeeklyStatus.COMPLETED if present >= days_required else WeeklyStatus.PENDING,
        remaining=max(0, days_required - present),
        breakdown=tuple(breakdown),
        days_required=days_required,
        total_days=total_days,
    )
