from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from src.pep_attendance.pep_attendance.core.enums import StatusCode, TermStatus
from src.pep_attendance.pep_attendance.core.exceptions import EmptyResultError, ParseError
from src.pep_attendance.pep_attendance.ingest.cells import to_cell
from src.pep_attendance.pep_attendance.ingest.ingestor import SpreadsheetIngestor

FESTIVAL_ROWS = [
    ["Name", "Roll", "TERM FESTIVAL", "%", "TotalAttended", "TotalClasses", "Criteria", "10/1/2025", "10/2/2025"],
    ["Asha", "R001", None, 90, 27, 30, "Cleared", "P", "A"],
]

TWO_TERM_ROWS = [
    ["PEP 2025-26", None, None, None, "TERM FESTIVAL", None, None, None, None, None, "REPUBLIC TERM", None, None, None],
    [None] * 14,
    [
        "S.No", "Gender", "Student Name", "Roll No",
        "%", "Attended", "Total Classes", "Criteria", datetime(2025, 10, 1), datetime(2025, 10, 2),
        "Attended", "Total Classes", "1/5/2026", "1/6/2026",
    ],
    [1, "F", "Asha Rao", "R001", 90, 27, 30, "Cleared", "P", "P", 3, None, "P", "W"],
    [2, "M", "Ankush Kumar", "R002", 10, 3, 30, None, "A", None, 1, 30, "L", "x"],
    [3, "M", "X", "R003", 0, 0, 30, None, "P", "P", 0, 30, "P", None],
    [4, "F", "Bina Das", "R4", 0, 0, 30, None, "P", "P", 0, 30, "P", None],
    [5, "F", "Chitra", "R005", "n/a", "?", "?", None, None, None, "?", "?", None, None],
]


def test_festival_scenario(workbook, ist_now):
    snapshot = SpreadsheetIngestor().ingest(workbook(FESTIVAL_ROWS), now=ist_now(2025, 10, 3))

    assert len(snapshot.students) == 1
    student = snapshot.students[0]
    term = student.terms[0]
    assert student.roll_no == "R001"
    assert student.attendance == {"10/1/2025": "P", "10/2/2025": "A"}
    assert term.term_name == "FESTIVAL TERM"
    assert term.attended_classes == 27
    assert term.status == TermStatus.CLEARED
    assert term.remaining == 0
    assert term.percentage == 90.0
    assert snapshot.term_names == ("FESTIVAL TERM",)
    assert snapshot.date_headers == ("10/1/2025", "10/2/2025")


def test_two_term_layout(workbook, ist_now):
    snapshot = SpreadsheetIngestor().ingest(workbook(TWO_TERM_ROWS), now=ist_now(2026, 1, 6))

    # "X" (name too short) and "R4" (roll too short) are skipped
    assert [s.roll_no for s in snapshot.students] == ["R001", "R002", "R005"]
    assert snapshot.term_names == ("FESTIVAL TERM", "REPUBLIC TERM")
    assert snapshot.date_headers == ("10/1/2025", "10/2/2025", "1/5/2026", "1/6/2026")

    asha, ankush, chitra = snapshot.students
    assert asha.gender == "F"
    assert asha.attendance == {"10/1/2025": "P", "10/2/2025": "P", "1/5/2026": "P", "1/6/2026": "W"}

    festival, republic = ankush.terms
    assert festival.attendance == {"10/1/2025": "A"}
    assert republic.attendance == {"1/5/2026": "L", "1/6/2026": "X"}
    assert ankush.status_on("1/6/2026") == StatusCode.ABSENT

    # Conducted counts only rows that passed validation.
    assert festival.classes_conducted == 2
    assert republic.classes_conducted == 2
    assert festival.classes_left == 28
    # Last festival class is > 30 days before "now".
    assert festival.status == TermStatus.NOT_CLEARED
    assert republic.is_open_ended
    assert republic.status == TermStatus.IN_PROGRESS
    assert republic.classes_left == 29
    assert republic.total_classes == 30

    chitra_festival, chitra_republic = chitra.terms
    assert chitra_festival.attended_classes == 0
    assert chitra_festival.total_classes == 30
    assert chitra_republic.remaining == 24


def test_ingest_is_deterministic(workbook, ist_now):
    payload = workbook(TWO_TERM_ROWS)
    now = ist_now(2026, 1, 6)
    ingestor = SpreadsheetIngestor()

    first = ingestor.ingest(payload, now=now)
    second = ingestor.ingest(payload, now=now)

    assert first.students == second.students


def test_legacy_layout_without_terms(workbook, ist_now):
    rows = [
        ["S.No", "Gender", "Student Name", "Roll No", "School", "1/5/2026", "1/6/2026"],
        [1, "F", "Asha Rao", "R001", "SOL", "P", None],
    ]

    snapshot = SpreadsheetIngestor().ingest(workbook(rows), now=ist_now(2026, 1, 6))

    student = snapshot.students[0]
    assert student.terms == ()
    assert student.school == "SOL"
    assert student.attendance == {"1/5/2026": "P"}


def test_prefers_attendance_sheet(workbook, ist_now):
    payload = workbook(FESTIVAL_ROWS, sheet_name="PEP Attendance", other_sheets={"Legend": [["P", "Present"]]})

    snapshot = SpreadsheetIngestor().ingest(payload, now=ist_now(2025, 10, 3))

    assert snapshot.students[0].student_name == "Asha"


def test_no_valid_students_is_an_empty_result(workbook, ist_now):
    rows = [["Name", "Roll", "10/1/2025"], ["A", "R1", "P"]]

    with pytest.raises(EmptyResultError):
        SpreadsheetIngestor().ingest(workbook(rows), now=ist_now(2025, 10, 3))


def test_garbage_bytes_are_a_parse_error(ist_now):
    with pytest.raises(ParseError) as exc:
        SpreadsheetIngestor().ingest(b"not a workbook" * 200, now=ist_now(2025, 10, 3))

    assert not isinstance(exc.value, EmptyResultError)


def test_reference_day_follows_the_configured_zone(workbook):
    rows = [
        ["Name", "Roll", "TERM FESTIVAL", "TotalAttended", "TotalClasses", "1/5/2026"],
        ["Asha", "R001", None, 10, 30, "P"],
    ]
    # 18:45 UTC on the 12th is 00:15 IST on the 13th: the last class becomes 8 days old.
    utc_now = datetime(2026, 1, 12, 18, 45, tzinfo=ZoneInfo("UTC"))

    snapshot = SpreadsheetIngestor(zone=ZoneInfo("Asia/Kolkata")).ingest(workbook(rows), now=utc_now)

    assert snapshot.last_updated.utcoffset().total_seconds() == 5.5 * 3600
    assert snapshot.students[0].terms[0].status == TermStatus.NOT_CLEARED


@pytest.mark.parametrize(
    "raw,expected",
    [(0.9, 90.0), (0.5, 50.0), (1, 1.0), (90, 90.0), ("85%", 85.0), (None, None)],
)
def test_percentage_cells(raw, expected):
    assert SpreadsheetIngestor._percentage(to_cell(raw)) == expected
