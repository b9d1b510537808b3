from __future__ import annotations

import io
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from openpyxl import Workbook

IST = ZoneInfo("Asia/Kolkata")


def build_workbook(rows, *, sheet_name="Attendance", other_sheets=None) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name
    for row in rows:
        ws.append(list(row))

    for name, extra_rows in (other_sheets or {}).items():
        extra = wb.create_sheet(name, 0)
        for row in extra_rows:
            extra.append(list(row))

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


@pytest.fixture
def workbook():
    return build_workbook


@pytest.fixture
def ist_now():
    def _make(year, month, day, hour=10, minute=0):
        return datetime(year, month, day, hour, minute, tzinfo=IST)

    return _make
