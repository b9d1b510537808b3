from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .cache.cleanup import ArtifactCleaner
from .cache.scheduler import RefreshScheduler
from .cache.service import AttendanceCache
from .common.datetime_utils import get_zone
from .core import constants
from .fetch.base import SpreadsheetFetcher
from .fetch.file_fetcher import FileSpreadsheetFetcher
from .fetch.http_fetcher import HttpSpreadsheetFetcher
from .ingest.ingestor import SpreadsheetIngestor
from .students.service import StudentReportService
from .terms.factory import TermStrategyFactory
from .terms.service import TermDerivationService


@dataclass(frozen=True)
class Container:
    fetcher: SpreadsheetFetcher
    ingestor: SpreadsheetIngestor
    cleaner: ArtifactCleaner
    cache: AttendanceCache
    scheduler: RefreshScheduler
    report_service: StudentReportService


def build_fetcher(settings: dict) -> SpreadsheetFetcher:
    spreadsheet_file = settings.get("SPREADSHEET_FILE")
    if spreadsheet_file:
        return FileSpreadsheetFetcher(Path(spreadsheet_file))

    return HttpSpreadsheetFetcher(
        str(settings.get("SPREADSHEET_URL") or ""),
        temp_root=Path(settings.get("TEMP_ROOT", "/tmp")),
        cookie=settings.get("SPREADSHEET_COOKIE") or None,
    )


def build_container(*, settings: dict, fetcher: Optional[SpreadsheetFetcher] = None) -> Container:
    zone = get_zone(settings.get("TIMEZONE", constants.DEFAULT_TIMEZONE))
    download_dir = Path(settings.get("DOWNLOAD_DIR", "/tmp/attendance"))
    temp_root = Path(settings.get("TEMP_ROOT", "/tmp"))

    fetcher = fetcher or build_fetcher(settings)
    term_service = TermDerivationService(strategy_factory=TermStrategyFactory())
    ingestor = SpreadsheetIngestor(term_service=term_service, zone=zone)
    cleaner = ArtifactCleaner(
        download_dir=download_dir,
        temp_root=temp_root,
        max_age_seconds=int(settings.get("ARTIFACT_MAX_AGE_SECONDS", constants.ARTIFACT_MAX_AGE_SECONDS)),
        zone=zone,
    )
    cache = AttendanceCache(
        fetcher,
        ingestor,
        cleaner=cleaner,
        download_dir=download_dir,
        zone=zone,
        refresh_timeout=float(settings.get("REFRESH_TIMEOUT_SECONDS", constants.REFRESH_TIMEOUT_SECONDS)),
    )
    scheduler = RefreshScheduler(
        cache,
        refresh_interval=float(settings.get("REFRESH_INTERVAL_SECONDS", constants.REFRESH_INTERVAL_SECONDS)),
        cleanup_interval=float(settings.get("CLEANUP_INTERVAL_SECONDS", constants.CLEANUP_INTERVAL_SECONDS)),
    )
    report_service = StudentReportService(cache)

    return Container(
        fetcher=fetcher,
        ingestor=ingestor,
        cleaner=cleaner,
        cache=cache,
        scheduler=scheduler,
        report_service=report_service,
    )
