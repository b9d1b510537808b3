"""Column-role detection for the attendance workbook.

Pure functions from rows of ``Cell`` to a ``SheetLayout``; no I/O here so the
heuristics can be exercised against fixed header fixtures.

Term-aware layout::

    row h-2   | ... | FESTIVAL TERM |     |        |       |          | ...  | REPUBLIC TERM | ...
    row h     | Name | Roll | ...  | %   | Attended | Total Classes | Criteria | 10/1/2025 | ...
    row h+1.. | student rows
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.constants import DEFAULT_NAME_COL, DEFAULT_ROLL_COL, HEADER_SCAN_ROWS, TERM_MARKER_ROW_OFFSET
from .cells import Cell, cell_to_date_key

HEADER_KEYWORDS = ("name", "roll", "student")
TERM_KEYWORD = "TERM"
LEGEND_LITERALS = ("(L-",)


@dataclass(frozen=True)
class IdentityColumns:
    name: int
    roll: int
    gender: int = -1
    school: int = -1


@dataclass(frozen=True)
class DateColumn:
    col: int
    date_key: str


@dataclass(frozen=True)
class TermLayout:
    term_name: str
    start_col: int
    end_col: int
    percentage_col: int = -1
    attended_col: int = -1
    total_col: int = -1
    criteria_col: int = -1
    date_columns: tuple[DateColumn, ...] = ()


@dataclass(frozen=True)
class SheetLayout:
    header_row: int
    marker_row: Optional[int]
    identity: IdentityColumns
    terms: tuple[TermLayout, ...]
    date_columns: tuple[DateColumn, ...]

    @property
    def is_term_aware(self) -> bool:
        return bool(self.terms)


def _lower(cell: Cell) -> str:
    return cell.as_text().strip().lower()


def pick_sheet_name(sheet_names: Sequence[str]) -> str:
    for name in sheet_names:
        if "attendance" in str(name).lower():
            return name
    return sheet_names[0]


def find_header_row(rows: Sequence[Sequence[Cell]], *, max_scan: int = HEADER_SCAN_ROWS) -> int:
    for i in range(min(max_scan, len(rows))):
        joined = " ".join(_lower(c) for c in rows[i])
        if any(keyword in joined for keyword in HEADER_KEYWORDS):
            return i
    return 0


def detect_identity_columns(header: Sequence[Cell]) -> IdentityColumns:
    gender = name = roll = school = -1
    for i, cell in enumerate(header):
        text = _lower(cell)
        if not text:
            continue
        if "gender" in text and gender == -1:
            gender = i
        if name == -1 and (("student" in text and "name" in text) or text == "name"):
            name = i
        if "roll" in text and roll == -1:
            roll = i
        if "school" in text and school == -1:
            school = i

    # Some sheets have no usable labels; keep the historical positions.
    return IdentityColumns(
        name=name if name != -1 else DEFAULT_NAME_COL,
        roll=roll if roll != -1 else DEFAULT_ROLL_COL,
        gender=gender,
        school=school,
    )


def is_term_marker(cell: Cell) -> bool:
    text = cell.as_text().upper()
    if TERM_KEYWORD not in text:
        return False
    return not any(literal in text for literal in LEGEND_LITERALS)


def term_name_from_marker(text: str, index: int) -> str:
    """"TERM FESTIVAL" / "Festival Term" -> "FESTIVAL TERM"."""
    label = re.sub(TERM_KEYWORD, " ", text.upper())
    label = re.sub(r"\s+", " ", label).strip(" -:")
    if not label:
        return f"TERM {index + 1}"
    return f"{label} {TERM_KEYWORD}"


def find_term_markers(marker_row: Sequence[Cell]) -> list[tuple[int, str]]:
    markers = []
    for col, cell in enumerate(marker_row):
        if is_term_marker(cell):
            markers.append((col, term_name_from_marker(cell.as_text(), len(markers))))
    return markers


def detect_date_columns(header: Sequence[Cell], start: int = 0, end: Optional[int] = None) -> list[DateColumn]:
    stop = len(header) if end is None else min(end, len(header))
    columns = []
    for col in range(max(start, 0), stop):
        key = cell_to_date_key(header[col])
        if key:
            columns.append(DateColumn(col=col, date_key=key))
    return columns


def detect_term_layout(header: Sequence[Cell], *, term_name: str, start: int, end: int) -> TermLayout:
    percentage = attended = total = criteria = -1
    for col in range(start, min(end, len(header))):
        text = _lower(header[col])
        if not text:
            continue
        if percentage == -1 and ("%" in text or "percent" in text):
            percentage = col
        elif attended == -1 and "attended" in text:
            attended = col
        elif total == -1 and "total" in text and "class" in text:
            total = col
        elif criteria == -1 and ("criteria" in text or "clear" in text):
            criteria = col

    return TermLayout(
        term_name=term_name,
        start_col=start,
        end_col=end,
        percentage_col=percentage,
        attended_col=attended,
        total_col=total,
        criteria_col=criteria,
        date_columns=tuple(detect_date_columns(header, start, end)),
    )


def _choose_marker_row(rows: Sequence[Sequence[Cell]], header_row: int) -> Optional[int]:
    candidate = header_row - TERM_MARKER_ROW_OFFSET
    if candidate >= 0 and find_term_markers(rows[candidate]):
        return candidate
    if find_term_markers(rows[header_row]):
        return header_row
    return None


def detect_layout(rows: Sequence[Sequence[Cell]]) -> SheetLayout:
    header_row = find_header_row(rows)
    header = rows[header_row]
    identity = detect_identity_columns(header)
    marker_row = _choose_marker_row(rows, header_row)

    if marker_row is None:
        return SheetLayout(
            header_row=header_row,
            marker_row=None,
            identity=identity,
            terms=(),
            date_columns=tuple(detect_date_columns(header)),
        )

    markers = find_term_markers(rows[marker_row])
    width = max(len(header), len(rows[marker_row]))
    terms = []
    for i, (start, name) in enumerate(markers):
        end = markers[i + 1][0] if i + 1 < len(markers) else width
        terms.append(detect_term_layout(header, term_name=name, start=start, end=end))

    return SheetLayout(
        header_row=header_row,
        marker_row=marker_row,
        identity=identity,
        terms=tuple(terms),
        date_columns=tuple(dc for t in terms for dc in t.date_columns),
    )
