from __future__ import annotations

from ...core.enums import TermStatus
from .base import TermContext, TermStrategy


def criteria_status(text: str) -> TermStatus | None:
    """Read the sheet's own clearance column ("Cleared" / "Not Cleared")."""
    lowered = (text or "").lower()
    if "cleared" not in lowered:
        return None
    if "not" in lowered:
        return TermStatus.NOT_CLEARED
    return TermStatus.CLEARED


def term_has_ended(ctx: TermContext) -> bool:
    if ctx.last_class_date is None:
        return False

    days_since = (ctx.today - ctx.last_class_date).days
    if days_since > ctx.rules.stale_days:
        return True
    return days_since > ctx.rules.ended_grace_days and ctx.source.total_classes >= ctx.rules.planned_classes


class FixedTermStrategy(TermStrategy):
    """Fixed-length term: trusts the criteria column, then the term-ended heuristic."""

    def decide_status(self, ctx: TermContext) -> TermStatus:
        from_sheet = criteria_status(ctx.source.criteria_text)
        if from_sheet is not None:
            return from_sheet
        if term_has_ended(ctx):
            return TermStatus.NOT_CLEARED
        return TermStatus.IN_PROGRESS

    def classes_left(self, ctx: TermContext) -> int:
        return max(0, ctx.rules.planned_classes - ctx.classes_conducted)
