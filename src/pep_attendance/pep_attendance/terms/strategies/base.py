from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ...core.constants import (
    DEFAULT_TOTAL_CLASSES,
    OPEN_ENDED_TERM_MARKERS,
    REQUIRED_CLASSES,
    TERM_ENDED_GRACE_DAYS,
    TERM_STALE_DAYS,
)
from ...core.enums import TermStatus
from ...students.model import TermSource


@dataclass(frozen=True)
class TermRules:
    required_classes: int = REQUIRED_CLASSES
    planned_classes: int = DEFAULT_TOTAL_CLASSES
    ended_grace_days: int = TERM_ENDED_GRACE_DAYS
    stale_days: int = TERM_STALE_DAYS
    open_ended_markers: tuple[str, ...] = OPEN_ENDED_TERM_MARKERS


@dataclass(frozen=True)
class TermContext:
    source: TermSource
    classes_conducted: int
    last_class_date: Optional[date]
    today: date
    rules: TermRules


class TermStrategy(ABC):
    """Strategy Pattern: encapsulate how a term kind resolves status and projections."""

    open_ended = False

    @abstractmethod
    def decide_status(self, ctx: TermContext) -> TermStatus:
        raise NotImplementedError

    @abstractmethod
    def classes_left(self, ctx: TermContext) -> int:
        raise NotImplementedError
