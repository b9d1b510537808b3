from __future__ import annotations

from dataclasses import dataclass, field

from .strategies.base import TermRules, TermStrategy
from .strategies.fixed_strategy import FixedTermStrategy
from .strategies.open_ended_strategy import OpenEndedTermStrategy


@dataclass
class TermStrategyFactory:
    """Factory Pattern: choose the term strategy from the term's name."""

    rules: TermRules = field(default_factory=TermRules)

    def is_open_ended(self, term_name: str) -> bool:
        upper = (term_name or "").upper()
        return any(marker.upper() in upper for marker in self.rules.open_ended_markers)

    def for_term(self, term_name: str) -> TermStrategy:
        if self.is_open_ended(term_name):
            return OpenEndedTermStrategy()
        return FixedTermStrategy()
