from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Mapping, Optional

from ..core.constants import DEFAULT_TOTAL_CLASSES, REQUIRED_CLASSES
from ..core.enums import StatusCode, TermStatus

# M/D/YYYY -> source status letter, one student.
AttendanceGrid = Mapping[str, str]


@dataclass(frozen=True)
class Term:
    """Một kỳ điểm danh (term) của một sinh viên."""

    term_name: str
    attended_classes: int
    total_classes: int
    classes_conducted: int
    status: TermStatus
    remaining: int
    classes_left: int
    percentage: float
    is_open_ended: bool
    attendance: AttendanceGrid = field(default_factory=dict)
    required_classes: int = REQUIRED_CLASSES


@dataclass(frozen=True)
class Student:
    """Thực thể miền (domain): sinh viên cùng toàn bộ lịch sử điểm danh."""

    roll_no: str
    student_name: str
    gender: str
    school: str
    attendance: AttendanceGrid = field(default_factory=dict)
    terms: tuple[Term, ...] = ()

    def status_on(self, date_key: str) -> StatusCode:
        return StatusCode.from_cell(self.attendance.get(date_key))

    def to_dict(self) -> dict:
        return {
            "rollNo": self.roll_no,
            "studentName": self.student_name,
            "gender": self.gender,
            "school": self.school,
            "attendance": dict(self.attendance),
            "terms": [term_to_dict(t) for t in self.terms],
        }


def term_to_dict(term: Term) -> dict:
    return {
        "termName": term.term_name,
        "attendedClasses": term.attended_classes,
        "totalClasses": term.total_classes,
        "classesConducted": term.classes_conducted,
        "requiredClasses": term.required_classes,
        "status": term.status.value,
        "remaining": term.remaining,
        "classesLeft": term.classes_left,
        "percentage": term.percentage,
        "isOpenEnded": term.is_open_ended,
        "attendance": dict(term.attendance),
    }


@dataclass(frozen=True)
class Snapshot:
    """Ảnh chụp dữ liệu sau một lần ingest; thay thế nguyên khối, không sửa tại chỗ."""

    students: tuple[Student, ...]
    date_headers: tuple[str, ...]
    term_names: tuple[str, ...]
    last_updated: datetime

    @property
    def student_count(self) -> int:
        return len(self.students)


@dataclass(frozen=True)
class TermSource:
    """Raw per-student term figures read from the sheet, before derivation."""

    term_name: str
    attended_classes: int
    total_classes: int = DEFAULT_TOTAL_CLASSES
    criteria_text: str = ""
    percentage: Optional[float] = None
