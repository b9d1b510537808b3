from __future__ import annotations

import logging
import os
import shutil
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from ..common.datetime_utils import now_in
from ..core.constants import ARTIFACT_MAX_AGE_SECONDS, FETCH_WORKDIR_PREFIX
from ..core.exceptions import CleanupError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanupResult:
    files_deleted: int = 0
    bytes_freed: int = 0
    dirs_deleted: int = 0

    def to_dict(self) -> dict:
        return {
            "filesDeleted": self.files_deleted,
            "bytesFreed": self.bytes_freed,
            "dirsDeleted": self.dirs_deleted,
        }


@dataclass(frozen=True)
class CleanupStats:
    files_deleted: int = 0
    bytes_freed: int = 0
    total_cleanups: int = 0
    last_cleanup: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "filesDeleted": self.files_deleted,
            "bytesFreed": self.bytes_freed,
            "totalCleanups": self.total_cleanups,
            "lastCleanup": self.last_cleanup.isoformat() if self.last_cleanup else None,
        }


class ArtifactCleaner:
    """Sweeps downloaded workbooks and abandoned fetch working directories.

    Only the filesystem is touched. A file that vanished or cannot be removed
    (for example held by a refresh in progress) is logged and skipped.
    """

    def __init__(
        self,
        *,
        download_dir: Path,
        temp_root: Optional[Path] = None,
        max_age_seconds: int = ARTIFACT_MAX_AGE_SECONDS,
        workdir_prefix: str = FETCH_WORKDIR_PREFIX,
        clock: Callable[[], float] = time.time,
        zone: ZoneInfo | str | None = None,
    ):
        self._download_dir = Path(download_dir)
        self._temp_root = Path(temp_root) if temp_root else None
        self._max_age = int(max_age_seconds)
        self._workdir_prefix = workdir_prefix
        self._clock = clock
        self._zone = zone
        self._lock = threading.Lock()
        self._stats = CleanupStats()

    @property
    def stats(self) -> CleanupStats:
        return self._stats

    def run_cleanup(self) -> CleanupResult:
        cutoff = self._clock() - self._max_age
        files_deleted = 0
        bytes_freed = 0
        dirs_deleted = 0

        for path in self._list(self._download_dir, dirs=False):
            try:
                freed = self._remove_file_if_stale(path, cutoff)
            except CleanupError as e:
                logger.warning("Cleanup skipped %s: %s", path, e)
                continue
            if freed is not None:
                files_deleted += 1
                bytes_freed += freed

        if self._temp_root is not None:
            for path in self._list(self._temp_root, dirs=True):
                if not path.name.startswith(self._workdir_prefix):
                    continue
                try:
                    removed = self._remove_dir_if_stale(path, cutoff)
                except CleanupError as e:
                    logger.warning("Cleanup skipped %s: %s", path, e)
                    continue
                if removed is not None:
                    dirs_deleted += 1
                    files_deleted += removed[0]
                    bytes_freed += removed[1]

        result = CleanupResult(files_deleted=files_deleted, bytes_freed=bytes_freed, dirs_deleted=dirs_deleted)
        with self._lock:
            self._stats = CleanupStats(
                files_deleted=self._stats.files_deleted + files_deleted,
                bytes_freed=self._stats.bytes_freed + bytes_freed,
                total_cleanups=self._stats.total_cleanups + 1,
                last_cleanup=now_in(self._zone),
            )

        logger.info(
            "Cleanup finished: %d files, %d dirs, %.1f KB freed",
            files_deleted,
            dirs_deleted,
            bytes_freed / 1024,
        )
        return result

    @staticmethod
    def _list(root: Path, *, dirs: bool) -> list[Path]:
        try:
            entries = list(root.iterdir())
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.warning("Cannot list %s: %s", root, e)
            return []

        out = []
        for entry in entries:
            try:
                if entry.is_dir() == dirs and (dirs or entry.is_file()):
                    out.append(entry)
            except OSError:
                continue
        return sorted(out)

    @staticmethod
    def _remove_file_if_stale(path: Path, cutoff: float) -> Optional[int]:
        try:
            st = path.stat()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CleanupError(str(e)) from e

        if st.st_mtime >= cutoff:
            return None

        try:
            path.unlink()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CleanupError(str(e)) from e

        logger.debug("Deleted %s (%d bytes)", path, st.st_size)
        return st.st_size

    @staticmethod
    def _remove_dir_if_stale(path: Path, cutoff: float) -> Optional[tuple[int, int]]:
        try:
            if path.stat().st_mtime >= cutoff:
                return None
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CleanupError(str(e)) from e

        files = 0
        size = 0
        for root, _, names in os.walk(path):
            for name in names:
                try:
                    size += os.path.getsize(os.path.join(root, name))
                    files += 1
                except OSError:
                    continue

        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CleanupError(str(e)) from e

        logger.debug("Deleted stale working directory %s", path)
        return files, size
