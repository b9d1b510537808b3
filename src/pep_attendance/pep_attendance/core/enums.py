from __future__ import annotations

from enum import Enum


class StatusCode(str, Enum):
    """Mã điểm danh một ký tự trong bảng tính (ô trống = UNMARKED)."""

    PRESENT = "P"
    LEAVE = "L"
    ABSENT = "A"
    WARNING = "W"
    UNMARKED = ""

    @classmethod
    def from_cell(cls, value: str | None) -> "StatusCode":
        text = (value or "").strip().upper()
        if not text:
            return cls.UNMARKED
        for code in (cls.PRESENT, cls.LEAVE, cls.WARNING, cls.ABSENT):
            if text == code.value:
                return code
        # Unknown letters are treated as absences, never dropped.
        return cls.ABSENT


class TermStatus(str, Enum):
    CLEARED = "Cleared"
    NOT_CLEARED = "Not Cleared"
    IN_PROGRESS = "In Progress"


class WeeklyStatus(str, Enum):
    COMPLETED = "Completed"
    PENDING = "Pending"


class DayStatus(str, Enum):
    """Trạng thái hiển thị cho từng ngày trong tuần."""

    PRESENT = "Present"
    LEAVE = "Leave"
    ABSENT = "Absent"
    WARNING = "Warning"
    NOT_MARKED = "Not marked"
    FUTURE = "Future"

    @classmethod
    def from_status_code(cls, code: StatusCode) -> "DayStatus":
        return {
            StatusCode.PRESENT: cls.PRESENT,
            StatusCode.LEAVE: cls.LEAVE,
            StatusCode.WARNING: cls.WARNING,
            StatusCode.ABSENT: cls.ABSENT,
            StatusCode.UNMARKED: cls.NOT_MARKED,
        }[code]
