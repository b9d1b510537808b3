from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ..core.exceptions import FetchError
from .base import validate_payload

logger = logging.getLogger(__name__)


@dataclass
class FileSpreadsheetFetcher:
    """Reads a workbook from disk (development, offline demos)."""

    path: Path

    def fetch(self) -> bytes:
        try:
            payload = Path(self.path).read_bytes()
        except OSError as e:
            raise FetchError(f"Cannot read {self.path}: {e}") from e

        logger.info("Read %d bytes from %s", len(payload), self.path)
        return validate_payload(payload)
