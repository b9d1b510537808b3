from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from src.pep_attendance.pep_attendance.common.datetime_utils import (
    calendar_sort_key,
    date_to_serial,
    format_calendar_date,
    parse_calendar_date,
    serial_to_date,
    to_zone,
    week_start,
)
from src.pep_attendance.pep_attendance.common.validators import require_min_length
from src.pep_attendance.pep_attendance.core.exceptions import ValidationError


def test_numeric_order_across_month_and_year_boundaries():
    keys = ["1/2/2026", "11/30/2025", "2/1/2025", "11/1/2025", "10/10/2025"]

    ordered = sorted(keys, key=calendar_sort_key)

    assert ordered == ["2/1/2025", "10/10/2025", "11/1/2025", "11/30/2025", "1/2/2026"]
    # Lexicographic order would get this wrong.
    assert "11/1/2025" < "2/1/2025"
    assert calendar_sort_key("11/1/2025") > calendar_sort_key("2/1/2025")
    assert calendar_sort_key("11/30/2025") < calendar_sort_key("1/2/2026")


def test_parse_and_format_are_unpadded():
    assert parse_calendar_date("01/05/2026") == date(2026, 1, 5)
    assert format_calendar_date(date(2026, 1, 5)) == "1/5/2026"


@pytest.mark.parametrize("value", ["13/1/2025", "2/30/2025", "2025-01-01", "", "abc"])
def test_parse_rejects_invalid_dates(value):
    with pytest.raises(ValidationError):
        parse_calendar_date(value)


def test_serial_epoch():
    assert serial_to_date(25569) == date(1970, 1, 1)
    assert serial_to_date(45931) == date(2025, 10, 1)
    assert date_to_serial(date(2025, 10, 1)) == 45931


def test_week_start_is_monday():
    assert week_start(date(2026, 1, 9)) == date(2026, 1, 5)
    assert week_start(date(2026, 1, 5)) == date(2026, 1, 5)
    assert week_start(date(2026, 1, 11)) == date(2026, 1, 5)


def test_require_min_length():
    assert require_min_length("  R001 ", "Roll", 3) == "R001"
    with pytest.raises(ValidationError):
        require_min_length("R1", "Roll", 3)
    with pytest.raises(ValidationError):
        require_min_length(None, "Roll", 3)


def test_to_zone_converts_the_instant():
    utc = datetime(2026, 1, 4, 20, 0, tzinfo=ZoneInfo("UTC"))

    local = to_zone(utc, "Asia/Kolkata")

    assert local == utc
    assert local.date() == date(2026, 1, 5)
    with pytest.raises(ValueError):
        to_zone(datetime(2026, 1, 4, 20, 0), "Asia/Kolkata")
