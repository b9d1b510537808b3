from __future__ import annotations

import logging
import threading
from typing import Callable

from ..core.constants import CLEANUP_INTERVAL_SECONDS, REFRESH_INTERVAL_SECONDS
from .service import AttendanceCache

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """Runs the periodic refresh and cleanup jobs on daemon threads.

    Refresh fires immediately on ``start()`` and then every
    ``refresh_interval`` seconds; cleanup runs every ``cleanup_interval``
    seconds on its own thread.
    """

    def __init__(
        self,
        cache: AttendanceCache,
        *,
        refresh_interval: float = REFRESH_INTERVAL_SECONDS,
        cleanup_interval: float = CLEANUP_INTERVAL_SECONDS,
    ):
        self._cache = cache
        self._refresh_interval = refresh_interval
        self._cleanup_interval = cleanup_interval
        self._stop = threading.Event()
        self._threads: list[threading.Thread] = []

    @property
    def running(self) -> bool:
        return bool(self._threads)

    def start(self) -> None:
        if self.running:
            return

        self._stop.clear()
        jobs = [
            ("pep-refresh-loop", self._cache.refresh, self._refresh_interval, True),
            ("pep-cleanup-loop", self._cache.run_cleanup, self._cleanup_interval, False),
        ]
        for name, job, interval, immediately in jobs:
            worker = threading.Thread(
                target=self._loop,
                args=(name, job, interval, immediately),
                name=name,
                daemon=True,
            )
            worker.start()
            self._threads.append(worker)

        logger.info(
            "Scheduler started (refresh every %ss, cleanup every %ss)",
            self._refresh_interval,
            self._cleanup_interval,
        )

    def stop(self, timeout: float = 5) -> None:
        self._stop.set()
        for worker in self._threads:
            worker.join(timeout=timeout)
        self._threads = []
        logger.info("Scheduler stopped")

    def _loop(self, name: str, job: Callable[[], object], interval: float, immediately: bool) -> None:
        if immediately:
            self._run(name, job)
        while not self._stop.wait(interval):
            self._run(name, job)

    @staticmethod
    def _run(name: str, job: Callable[[], object]) -> None:
        try:
            job()
        except Exception:
            # keep the loop alive
            logger.exception("%s job crashed", name)
