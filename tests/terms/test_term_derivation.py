from datetime import date, timedelta

import pytest

from src.pep_attendance.pep_attendance.core.enums import TermStatus
from src.pep_attendance.pep_attendance.students.model import TermSource
from src.pep_attendance.pep_attendance.terms.factory import TermStrategyFactory
from src.pep_attendance.pep_attendance.terms.service import TermDerivationService
from src.pep_attendance.pep_attendance.terms.strategies.base import TermRules
from src.pep_attendance.pep_attendance.terms.strategies.fixed_strategy import FixedTermStrategy, criteria_status
from src.pep_attendance.pep_attendance.terms.strategies.open_ended_strategy import OpenEndedTermStrategy

TODAY = date(2026, 2, 20)


def derive(name="FESTIVAL TERM", attended=10, total=30, criteria="", conducted=20, days_ago=None, percentage=None):
    svc = TermDerivationService()
    last = TODAY - timedelta(days=days_ago) if days_ago is not None else None
    return svc.derive(
        TermSource(
            term_name=name,
            attended_classes=attended,
            total_classes=total,
            criteria_text=criteria,
            percentage=percentage,
        ),
        classes_conducted=conducted,
        last_class_date=last,
        today=TODAY,
    )


def test_factory_picks_open_ended_for_republic_term():
    factory = TermStrategyFactory()

    assert isinstance(factory.for_term("REPUBLIC TERM"), OpenEndedTermStrategy)
    assert isinstance(factory.for_term("Republic Term 2026"), OpenEndedTermStrategy)
    assert isinstance(factory.for_term("FESTIVAL TERM"), FixedTermStrategy)


def test_factory_markers_are_configurable():
    factory = TermStrategyFactory(rules=TermRules(open_ended_markers=("MONSOON",)))

    assert factory.is_open_ended("MONSOON TERM")
    assert not factory.is_open_ended("REPUBLIC TERM")


def test_attendance_threshold_beats_not_cleared_criteria():
    term = derive(attended=24, criteria="Not Cleared")

    assert term.status == TermStatus.CLEARED
    assert term.remaining == 0


def test_open_ended_term_never_times_out():
    term = derive(name="REPUBLIC TERM", attended=10, conducted=40, days_ago=60, criteria="Not Cleared")

    assert term.status == TermStatus.IN_PROGRESS
    assert term.is_open_ended
    # Projects against attendance, not conducted classes.
    assert term.classes_left == 20
    assert term.remaining == 14


def test_criteria_column_decides_fixed_term():
    assert derive(criteria="Cleared").status == TermStatus.CLEARED
    assert derive(criteria="NOT CLEARED", days_ago=1).status == TermStatus.NOT_CLEARED


@pytest.mark.parametrize(
    "days_ago,total,expected",
    [
        (10, 30, TermStatus.NOT_CLEARED),
        (10, 20, TermStatus.IN_PROGRESS),
        (31, 20, TermStatus.NOT_CLEARED),
        (5, 30, TermStatus.IN_PROGRESS),
        (7, 30, TermStatus.IN_PROGRESS),
        (None, 30, TermStatus.IN_PROGRESS),
    ],
)
def test_term_ended_heuristic(days_ago, total, expected):
    assert derive(total=total, days_ago=days_ago).status == expected


def test_fixed_term_classes_left_uses_conducted():
    assert derive(conducted=12).classes_left == 18
    assert derive(conducted=35).classes_left == 0


@pytest.mark.parametrize("attended", [0, 5, 23, 24, 27, 40])
def test_remaining_invariant(attended):
    term = derive(attended=attended)

    assert term.remaining == max(0, term.required_classes - attended)


def test_percentage_from_sheet_or_derived():
    assert derive(attended=27, percentage=90).percentage == 90.0
    assert derive(attended=15, total=30).percentage == 50.0


def test_criteria_status_text_rules():
    assert criteria_status("Cleared") == TermStatus.CLEARED
    assert criteria_status("Not cleared") == TermStatus.NOT_CLEARED
    assert criteria_status("") is None
    assert criteria_status("Pending") is None
