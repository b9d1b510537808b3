from __future__ import annotations

from datetime import date
from typing import Mapping, Optional

from ..core.enums import TermStatus
from ..students.model import Term, TermSource
from .factory import TermStrategyFactory
from .strategies.base import TermContext, TermRules


class TermDerivationService:
    """Use case: turn raw per-term sheet figures into a derived Term.

    Status precedence:
      1. attended >= required           -> CLEARED (always wins)
      2. open-ended term                -> IN_PROGRESS
      3/4. sheet criteria column        -> CLEARED / NOT_CLEARED
      5. term-ended heuristic           -> NOT_CLEARED
      6. otherwise                      -> IN_PROGRESS
    """

    def __init__(self, *, strategy_factory: TermStrategyFactory | None = None):
        self._factory = strategy_factory or TermStrategyFactory()

    @property
    def rules(self) -> TermRules:
        return self._factory.rules

    def derive(
        self,
        source: TermSource,
        *,
        classes_conducted: int,
        last_class_date: Optional[date],
        today: date,
        attendance: Mapping[str, str] | None = None,
    ) -> Term:
        rules = self.rules
        strategy = self._factory.for_term(source.term_name)
        ctx = TermContext(
            source=source,
            classes_conducted=int(classes_conducted),
            last_class_date=last_class_date,
            today=today,
            rules=rules,
        )

        if source.attended_classes >= rules.required_classes:
            status = TermStatus.CLEARED
        else:
            status = strategy.decide_status(ctx)

        return Term(
            term_name=source.term_name,
            attended_classes=source.attended_classes,
            total_classes=source.total_classes,
            classes_conducted=ctx.classes_conducted,
            status=status,
            remaining=max(0, rules.required_classes - source.attended_classes),
            classes_left=strategy.classes_left(ctx),
            percentage=self._percentage(source),
            is_open_ended=strategy.open_ended,
            attendance=dict(attendance or {}),
            required_classes=rules.required_classes,
        )

    def _percentage(self, source: TermSource) -> float:
        if source.percentage is not None:
            return round(float(source.percentage), 1)
        if source.total_classes <= 0:
            return 0.0
        return round(source.attended_classes / source.total_classes * 100, 1)
