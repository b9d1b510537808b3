from __future__ import annotations

import io
import logging
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

import pandas as pd

from ..common.datetime_utils import now_in, parse_calendar_date, to_zone
from ..common.validators import require_min_length
from ..core.constants import DEFAULT_TOTAL_CLASSES, MIN_NAME_LENGTH, MIN_ROLL_LENGTH
from ..core.exceptions import EmptyResultError, ParseError, ValidationError
from ..students.model import Snapshot, Student, Term, TermSource
from ..terms.service import TermDerivationService
from .cells import Cell, cell_at, cell_to_float, cell_to_int, cell_to_status_text, row_to_cells
from .layout import SheetLayout, TermLayout, detect_layout, pick_sheet_name

logger = logging.getLogger(__name__)


class SpreadsheetIngestor:
    """Turn the downloaded workbook bytes into a ``Snapshot``.

    Raises ``ParseError`` for unreadable/structurally broken workbooks and
    ``EmptyResultError`` when no student row survives validation. Invalid rows
    are skipped one by one and never abort the whole parse.
    """

    def __init__(
        self,
        *,
        term_service: TermDerivationService | None = None,
        zone: ZoneInfo | None = None,
    ):
        self._terms = term_service or TermDerivationService()
        self._zone = zone

    def read_rows(self, payload: bytes) -> list[list[Cell]]:
        try:
            sheets = pd.read_excel(io.BytesIO(payload), sheet_name=None, header=None, engine="openpyxl")
        except Exception as e:
            # openpyxl/zipfile raise a wide range of types for non-workbook bytes
            raise ParseError(f"Could not read workbook: {e}") from e

        if not sheets:
            raise ParseError("Workbook has no sheets")

        sheet_name = pick_sheet_name(list(sheets.keys()))
        logger.info("Available sheets: %s; using %r", ", ".join(map(str, sheets.keys())), sheet_name)

        frame = sheets[sheet_name]
        rows = [row_to_cells(values) for values in frame.itertuples(index=False, name=None)]
        logger.info("Found %d rows in sheet %r", len(rows), sheet_name)
        return rows

    def ingest(self, payload: bytes, *, now: Optional[datetime] = None) -> Snapshot:
        now = to_zone(now, self._zone) if now else now_in(self._zone)
        return self.ingest_rows(self.read_rows(payload), now=now)

    def ingest_rows(self, rows: list[list[Cell]], *, now: datetime) -> Snapshot:
        if not rows:
            raise ParseError("Sheet is empty")

        layout = detect_layout(rows)
        logger.info(
            "Header row %d, marker row %s, columns name=%d roll=%d gender=%d school=%d, terms=%s",
            layout.header_row,
            layout.marker_row,
            layout.identity.name,
            layout.identity.roll,
            layout.identity.gender,
            layout.identity.school,
            [t.term_name for t in layout.terms],
        )
        if not layout.is_term_aware:
            logger.info("No term markers found, reading every date column")

        identities: list[tuple[list[Cell], str, str]] = []
        for row_idx in range(layout.header_row + 1, len(rows)):
            row = rows[row_idx]
            try:
                name = require_min_length(cell_at(row, layout.identity.name).as_text(), "Student name", MIN_NAME_LENGTH)
                roll = require_min_length(cell_at(row, layout.identity.roll).as_text(), "Roll number", MIN_ROLL_LENGTH)
            except ValidationError as e:
                logger.debug("Skipping row %d: %s", row_idx + 1, e)
                continue
            identities.append((row, name, roll))

        if not identities:
            raise EmptyResultError("No students found in Excel file")

        valid_rows = [row for row, _, _ in identities]
        conducted = [self._classes_conducted(term, valid_rows) for term in layout.terms]
        last_dates = [self._last_class_date(term) for term in layout.terms]
        today = now.date()

        students = []
        for row, name, roll in identities:
            terms = tuple(
                self._build_term(row, term, conducted=conducted[i], last_class_date=last_dates[i], today=today)
                for i, term in enumerate(layout.terms)
            )
            students.append(
                Student(
                    roll_no=roll,
                    student_name=name,
                    gender=self._optional_text(row, layout.identity.gender),
                    school=self._optional_text(row, layout.identity.school),
                    attendance=self._grid(row, layout),
                    terms=terms,
                )
            )

        logger.info("Parsed %d students from Excel", len(students))
        return Snapshot(
            students=tuple(students),
            date_headers=self._date_headers(layout),
            term_names=tuple(t.term_name for t in layout.terms),
            last_updated=now,
        )

    def _build_term(
        self,
        row: list[Cell],
        layout: TermLayout,
        *,
        conducted: int,
        last_class_date: Optional[date],
        today: date,
    ) -> Term:
        source = TermSource(
            term_name=layout.term_name,
            attended_classes=cell_to_int(cell_at(row, layout.attended_col), 0),
            total_classes=cell_to_int(cell_at(row, layout.total_col), DEFAULT_TOTAL_CLASSES),
            criteria_text=cell_at(row, layout.criteria_col).as_text(),
            percentage=self._percentage(cell_at(row, layout.percentage_col)),
        )
        attendance = {}
        for dc in layout.date_columns:
            mark = cell_to_status_text(cell_at(row, dc.col))
            if mark:
                attendance[dc.date_key] = mark

        return self._terms.derive(
            source,
            classes_conducted=conducted,
            last_class_date=last_class_date,
            today=today,
            attendance=attendance,
        )

    def _grid(self, row: list[Cell], layout: SheetLayout) -> dict[str, str]:
        grid = {}
        for dc in layout.date_columns:
            mark = cell_to_status_text(cell_at(row, dc.col))
            if mark:
                grid[dc.date_key] = mark
        return grid

    @staticmethod
    def _classes_conducted(term: TermLayout, rows: list[list[Cell]]) -> int:
        return sum(1 for dc in term.date_columns if any(not cell_at(row, dc.col).is_blank for row in rows))

    @staticmethod
    def _last_class_date(term: TermLayout) -> Optional[date]:
        dates = [parse_calendar_date(dc.date_key) for dc in term.date_columns]
        return max(dates) if dates else None

    @staticmethod
    def _date_headers(layout: SheetLayout) -> tuple[str, ...]:
        seen: dict[str, None] = {}
        for dc in layout.date_columns:
            seen.setdefault(dc.date_key, None)
        return tuple(seen)

    @staticmethod
    def _optional_text(row: list[Cell], col: int) -> str:
        return cell_at(row, col).as_text().strip() if col >= 0 else ""

    @staticmethod
    def _percentage(cell: Cell) -> Optional[float]:
        value = cell_to_float(cell)
        if value is None:
            return None
        # Percent-formatted cells arrive as fractions (0.9 == 90%).
        if 0 < value < 1:
            return value * 100
        return value
