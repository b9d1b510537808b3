from __future__ import annotations

from ...core.enums import TermStatus
from .base import TermContext, TermStrategy


class OpenEndedTermStrategy(TermStrategy):
    """Term without a fixed end date: never times out, projects against attendance."""

    open_ended = True

    def decide_status(self, ctx: TermContext) -> TermStatus:
        return TermStatus.IN_PROGRESS

    def classes_left(self, ctx: TermContext) -> int:
        return max(0, ctx.rules.planned_classes - ctx.source.attended_classes)
