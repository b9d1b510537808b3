"""Spreadsheet cell values as a small tagged variant.

pandas hands us whatever the workbook held (str, float, numpy ints, Timestamps,
NaN...). Everything is folded into ``Cell`` right at the boundary so the rest
of the ingestor only deals with Empty / Number / Text, and every conversion
below has a result for every kind.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

import pandas as pd

from ..common.datetime_utils import date_to_serial, format_calendar_date, serial_to_date, try_parse_calendar_date
from ..core.constants import SERIAL_DATE_MAX, SERIAL_DATE_MIN


class CellKind(str, Enum):
    EMPTY = "empty"
    NUMBER = "number"
    TEXT = "text"


@dataclass(frozen=True)
class Cell:
    kind: CellKind
    number: float = 0.0
    text: str = ""

    @property
    def is_blank(self) -> bool:
        return self.kind == CellKind.EMPTY

    def as_text(self) -> str:
        if self.kind == CellKind.TEXT:
            return self.text
        if self.kind == CellKind.NUMBER:
            if float(self.number).is_integer():
                return str(int(self.number))
            return str(self.number)
        return ""


EMPTY = Cell(CellKind.EMPTY)


def to_cell(raw: Any) -> Cell:
    if raw is None:
        return EMPTY
    if isinstance(raw, str):
        text = raw.strip()
        return Cell(CellKind.TEXT, text=text) if text else EMPTY
    if isinstance(raw, bool):
        return Cell(CellKind.TEXT, text=str(raw))
    if isinstance(raw, datetime):
        if pd.isna(raw):
            return EMPTY
        return Cell(CellKind.NUMBER, number=date_to_serial(raw.date()))
    if isinstance(raw, date):
        return Cell(CellKind.NUMBER, number=date_to_serial(raw))
    if isinstance(raw, numbers.Number):
        value = float(raw)
        if math.isnan(value):
            return EMPTY
        return Cell(CellKind.NUMBER, number=value)
    if pd.isna(raw):
        return EMPTY
    return to_cell(str(raw))


def row_to_cells(values) -> list[Cell]:
    return [to_cell(v) for v in values]


def cell_at(row: list[Cell], col: int) -> Cell:
    if col < 0 or col >= len(row):
        return EMPTY
    return row[col]


def cell_to_date_key(cell: Cell) -> Optional[str]:
    """M/D/YYYY for date-like header cells, None for anything else."""
    if cell.kind == CellKind.NUMBER:
        if SERIAL_DATE_MIN < cell.number < SERIAL_DATE_MAX:
            return format_calendar_date(serial_to_date(cell.number))
        return None
    if cell.kind == CellKind.TEXT:
        parsed = try_parse_calendar_date(cell.text)
        return format_calendar_date(parsed) if parsed else None
    return None


def cell_to_float(cell: Cell) -> Optional[float]:
    if cell.kind == CellKind.NUMBER:
        return float(cell.number)
    if cell.kind == CellKind.TEXT:
        try:
            value = float(cell.text.rstrip("%").strip())
        except ValueError:
            return None
        return value if math.isfinite(value) else None
    return None


def cell_to_int(cell: Cell, default: int) -> int:
    value = cell_to_float(cell)
    if value is None:
        return default
    return int(round(value))


def cell_to_status_text(cell: Cell) -> str:
    """Upper-cased mark as stored in the grid ("" when blank)."""
    return cell.as_text().strip().upper()
