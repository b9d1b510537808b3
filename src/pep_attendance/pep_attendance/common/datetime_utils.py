from __future__ import annotations

import re
from datetime import date, datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.constants import DEFAULT_TIMEZONE, EXCEL_EPOCH_SERIAL, SECONDS_PER_DAY
from ..core.exceptions import ValidationError

CALENDAR_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_calendar_date(value: str) -> date:
    """Parse M/D/YYYY string into date."""
    match = CALENDAR_DATE_RE.match((value or "").strip())
    if not match:
        raise ValidationError(f"Invalid calendar date: {value!r}")
    month, day, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as e:
        raise ValidationError(f"Invalid calendar date: {value!r}") from e


def try_parse_calendar_date(value: str) -> Optional[date]:
    try:
        return parse_calendar_date(value)
    except ValidationError:
        return None


def format_calendar_date(value: date) -> str:
    """Canonical M/D/YYYY form, no zero padding."""
    return f"{value.month}/{value.day}/{value.year}"


def calendar_sort_key(value: str) -> tuple[int, int, int]:
    """Sort key on decoded (year, month, day); undecodable strings sort first."""
    parsed = try_parse_calendar_date(value)
    if parsed is None:
        return (0, 0, 0)
    return (parsed.year, parsed.month, parsed.day)


def serial_to_date(serial: float) -> date:
    """Spreadsheet serial number to calendar date (UTC, 25569 = 1970-01-01)."""
    seconds = (float(serial) - EXCEL_EPOCH_SERIAL) * SECONDS_PER_DAY
    return (_EPOCH + timedelta(seconds=seconds)).date()


def date_to_serial(value: date) -> float:
    moment = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return (moment - _EPOCH).total_seconds() / SECONDS_PER_DAY + EXCEL_EPOCH_SERIAL


def get_zone(name: str | None = None) -> ZoneInfo:
    return ZoneInfo(name or DEFAULT_TIMEZONE)


def now_in(zone: ZoneInfo | str | None = None) -> datetime:
    """Current time in the configured zone.

    Note: Wrapped so tests can patch/mocked easier.
    """
    if not isinstance(zone, ZoneInfo):
        zone = get_zone(zone)
    return datetime.now(zone)


def to_zone(moment: datetime, zone: ZoneInfo | str | None = None) -> datetime:
    """Same instant expressed in the reference zone; naive datetimes are rejected."""
    if moment.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    if not isinstance(zone, ZoneInfo):
        zone = get_zone(zone)
    return moment.astimezone(zone)


def week_start(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())
