from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from ..common.datetime_utils import format_calendar_date, now_in, to_zone
from ..core.constants import ARTIFACT_PREFIX, REFRESH_TIMEOUT_SECONDS, WEEKLY_REQUIRED_DAYS
from ..core.enums import DayStatus
from ..core.exceptions import ConcurrencyError
from ..fetch.base import SpreadsheetFetcher
from ..ingest.ingestor import SpreadsheetIngestor
from ..students.model import Snapshot, Student
from ..weekly.model import WeeklyWindow
from ..weekly.service import compute_weekly_window, count_present_this_week
from .cleanup import ArtifactCleaner, CleanupResult, CleanupStats

logger = logging.getLogger(__name__)

ALREADY_LOADING = "Already loading"


@dataclass(frozen=True)
class RefreshOutcome:
    success: bool
    student_count: Optional[int] = None
    last_updated: Optional[datetime] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class CacheStatus:
    last_updated: Optional[datetime]
    student_count: int
    is_loading: bool
    error: Optional[str]
    is_demo_data: bool
    cleanup_stats: CleanupStats

    def to_dict(self) -> dict:
        return {
            "lastUpdated": self.last_updated.isoformat() if self.last_updated else None,
            "studentCount": self.student_count,
            "isLoading": self.is_loading,
            "error": self.error,
            "isDemoData": self.is_demo_data,
            "cleanupStats": self.cleanup_stats.to_dict(),
        }


class _RefreshAttempt(threading.Thread):
    """One fetch+parse run. Abandoned (not killed) when it outlives the timeout."""

    def __init__(self, target: Callable[[], Snapshot]):
        super().__init__(name=f"pep-refresh-{uuid.uuid4().hex[:6]}", daemon=True)
        self._target_fn = target
        self.done = threading.Event()
        self.snapshot: Optional[Snapshot] = None
        self.error: Optional[BaseException] = None

    def run(self) -> None:
        try:
            self.snapshot = self._target_fn()
        except Exception as e:
            self.error = e
        finally:
            self.done.set()


class AttendanceCache:
    """Owns the single live attendance snapshot.

    Readers only ever see a complete ``Snapshot``: a refresh builds a new one
    off to the side and swaps the reference in one assignment. At most one
    refresh runs at a time; a second request is rejected, not queued.
    """

    def __init__(
        self,
        fetcher: SpreadsheetFetcher,
        ingestor: SpreadsheetIngestor,
        *,
        cleaner: ArtifactCleaner,
        download_dir: Path,
        zone: ZoneInfo,
        refresh_timeout: float = REFRESH_TIMEOUT_SECONDS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._fetcher = fetcher
        self._ingestor = ingestor
        self._cleaner = cleaner
        self._download_dir = Path(download_dir)
        self._zone = zone
        self._timeout = refresh_timeout
        self._clock = clock or (lambda: now_in(zone))

        self._lock = threading.Lock()
        self._snapshot: Optional[Snapshot] = None
        self._loading = False
        self._error: Optional[str] = None
        self._is_demo = False

    # ------------------------------------------------------------------
    # Refresh lifecycle
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> Optional[Snapshot]:
        return self._snapshot

    @property
    def is_loading(self) -> bool:
        return self._loading

    def now(self) -> datetime:
        return self._clock()

    def _reference_now(self, now: Optional[datetime]) -> datetime:
        return to_zone(now or self.now(), self._zone)

    def _begin(self) -> None:
        with self._lock:
            if self._loading:
                raise ConcurrencyError(ALREADY_LOADING)
            self._loading = True
            self._error = None

    def refresh(self) -> RefreshOutcome:
        try:
            self._begin()
        except ConcurrencyError as e:
            logger.info("Already loading, skipping refresh")
            return RefreshOutcome(success=False, error=str(e))

        logger.info("Starting data refresh...")
        attempt = _RefreshAttempt(self._load_snapshot)
        attempt.start()

        if not attempt.done.wait(self._timeout):
            return self._fail(f"Refresh timeout after {self._timeout:g} seconds")
        if attempt.error is not None:
            return self._fail(str(attempt.error) or type(attempt.error).__name__)
        return self._succeed(attempt.snapshot)

    def _load_snapshot(self) -> Snapshot:
        payload = self._fetcher.fetch()
        artifact = self._write_artifact(payload)
        try:
            return self._ingestor.ingest(payload, now=self.now())
        finally:
            if artifact is not None:
                try:
                    artifact.unlink(missing_ok=True)
                except OSError as e:
                    logger.warning("Could not delete %s: %s", artifact, e)

    def _write_artifact(self, payload: bytes) -> Optional[Path]:
        try:
            self._download_dir.mkdir(parents=True, exist_ok=True)
            path = self._download_dir / f"{ARTIFACT_PREFIX}{uuid.uuid4().hex}.xlsx"
            path.write_bytes(payload)
        except OSError as e:
            # Parsing works from memory; a read-only disk must not fail the refresh.
            logger.warning("Could not save workbook to %s: %s", self._download_dir, e)
            return None

        logger.info("Saved file to %s", path)
        return path

    def _succeed(self, snapshot: Snapshot) -> RefreshOutcome:
        with self._lock:
            self._snapshot = snapshot
            self._error = None
            self._is_demo = False
            self._loading = False

        logger.info("SUCCESS: Loaded %d students", snapshot.student_count)
        return RefreshOutcome(
            success=True,
            student_count=snapshot.student_count,
            last_updated=snapshot.last_updated,
        )

    def _fail(self, message: str) -> RefreshOutcome:
        with self._lock:
            self._error = message
            self._is_demo = True
            self._loading = False

        logger.error("Refresh failed: %s", message)
        return RefreshOutcome(success=False, error=message)

    # ------------------------------------------------------------------
    # Cleanup
    # ------------------------------------------------------------------

    def run_cleanup(self) -> CleanupResult:
        return self._cleaner.run_cleanup()

    def get_cleanup_stats(self) -> CleanupStats:
        return self._cleaner.stats

    # ------------------------------------------------------------------
    # Queries (current snapshot only, no I/O)
    # ------------------------------------------------------------------

    def get_status(self) -> CacheStatus:
        snapshot = self._snapshot
        return CacheStatus(
            last_updated=snapshot.last_updated if snapshot else None,
            student_count=snapshot.student_count if snapshot else 0,
            is_loading=self._loading,
            error=self._error,
            is_demo_data=self._is_demo,
            cleanup_stats=self._cleaner.stats,
        )

    def students(self) -> tuple[Student, ...]:
        snapshot = self._snapshot
        return snapshot.students if snapshot else ()

    def find_by_roll(self, partial: str) -> Optional[Student]:
        needle = (partial or "").strip().lower()
        if not needle:
            return None
        for student in self.students():
            if needle in student.roll_no.lower():
                return student
        return None

    def search_by_name(self, query: str) -> list[Student]:
        terms = (query or "").lower().split()
        if not terms:
            return []

        matches = [s for s in self.students() if all(t in s.student_name.lower() for t in terms)]
        first_term = terms[0]

        def rank(student: Student) -> tuple[int, str, str]:
            lowered = student.student_name.lower()
            first_name = lowered.split()[0] if lowered.split() else ""
            if first_name == first_term:
                bucket = 0
            elif first_name.startswith(first_term):
                bucket = 1
            else:
                bucket = 2
            return bucket, lowered, student.roll_no

        return sorted(matches, key=rank)

    def find_by_name(self, query: str) -> Optional[Student]:
        results = self.search_by_name(query)
        return results[0] if results else None

    def get_student(self, *, roll: Optional[str] = None, name: Optional[str] = None) -> Optional[Student]:
        if roll:
            return self.find_by_roll(roll)
        if name:
            return self.find_by_name(name)
        return None

    def search(self, *, roll: Optional[str] = None, name: Optional[str] = None) -> list[Student]:
        if roll:
            student = self.find_by_roll(roll)
            return [student] if student else []
        if name:
            return self.search_by_name(name)
        return []

    def get_pending_students(self, *, now: Optional[datetime] = None) -> list[Student]:
        now = self._reference_now(now)
        return [s for s in self.students() if count_present_this_week(s.attendance, now) < WEEKLY_REQUIRED_DAYS]

    def get_today_status(self, student: Student, *, now: Optional[datetime] = None) -> str:
        now = self._reference_now(now)
        return DayStatus.from_status_code(student.status_on(format_calendar_date(now.date()))).value

    def get_weekly_window(self, student: Student, *, now: Optional[datetime] = None) -> WeeklyWindow:
        return compute_weekly_window(student.attendance, self._reference_now(now))
