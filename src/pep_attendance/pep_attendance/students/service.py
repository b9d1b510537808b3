from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..cache.service import AttendanceCache
from ..common.datetime_utils import calendar_sort_key, parse_calendar_date
from ..core.enums import DayStatus, StatusCode
from .model import Student


class StudentReportService:
    """Use case: read-models the dashboard shows for one or many students."""

    def __init__(self, cache: AttendanceCache):
        self._cache = cache

    def student_response(self, student: Student, *, now: Optional[datetime] = None) -> dict:
        now = now or self._cache.now()
        today_status = self._cache.get_today_status(student, now=now)
        weekly = self._cache.get_weekly_window(student, now=now)

        return {
            "student": student.to_dict(),
            "todayDate": now.date().isoformat(),
            "todayStatus": today_status,
            "isTodayMarked": today_status != DayStatus.NOT_MARKED.value,
            **weekly.to_dict(),
        }

    def pending_report(self, *, now: Optional[datetime] = None) -> list[dict]:
        now = now or self._cache.now()
        rows = []
        for student in self._cache.get_pending_students(now=now):
            weekly = self._cache.get_weekly_window(student, now=now)
            rows.append(
                {
                    "studentName": student.student_name,
                    "rollNo": student.roll_no,
                    "gender": student.gender,
                    "school": student.school,
                    "daysPresent": weekly.days_present,
                    "daysRequired": weekly.days_required,
                    "daysRemaining": weekly.remaining,
                    "weeklyBreakdown": weekly.to_dict()["weeklyBreakdown"],
                }
            )

        rows.sort(key=lambda r: r["daysPresent"])
        return rows

    def attendance_history(self, student: Student) -> dict:
        """Marks grouped by month (newest first) plus overall totals."""
        months: dict[str, list[dict]] = {}
        total_present = total_leave = total_absent = 0

        for key in sorted(student.attendance, key=calendar_sort_key, reverse=True):
            mark = student.attendance[key]
            day = parse_calendar_date(key)
            months.setdefault(day.strftime("%B %Y"), []).append({"date": key, "status": mark})

            code = StatusCode.from_cell(mark)
            if code == StatusCode.PRESENT:
                total_present += 1
            elif code == StatusCode.LEAVE:
                total_leave += 1
            else:
                total_absent += 1

        total_days = total_present + total_leave + total_absent
        rate = round(total_present / total_days * 100) if total_days else 0

        return {
            "months": months,
            "stats": {
                "totalPresent": total_present,
                "totalLeave": total_leave,
                "totalAbsent": total_absent,
                "attendanceRate": rate,
            },
        }
