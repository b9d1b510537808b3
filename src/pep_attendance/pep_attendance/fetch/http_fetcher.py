from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Optional

import requests

from ..core.constants import FETCH_WORKDIR_PREFIX
from ..core.exceptions import FetchError
from .base import validate_payload

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
XLSX_ACCEPT = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet, */*"


class HttpSpreadsheetFetcher:
    """Download the shared workbook over HTTP.

    The share link must allow direct download (``&download=1`` style). If the
    host needs a browser session, pass the cookie header obtained elsewhere.
    Each attempt works inside its own ``pep_fetch_*`` directory under
    ``temp_root``; a crashed attempt leaves it behind for the cleanup sweep.
    """

    def __init__(
        self,
        url: str,
        *,
        temp_root: Path,
        cookie: Optional[str] = None,
        timeout: int = 60,
        session: Optional[requests.Session] = None,
    ):
        self._url = url
        self._temp_root = Path(temp_root)
        self._timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": USER_AGENT, "Accept": XLSX_ACCEPT})
        if cookie:
            self._session.headers["Cookie"] = cookie

    def fetch(self) -> bytes:
        if not self._url:
            raise FetchError("SPREADSHEET_URL is not configured")

        self._temp_root.mkdir(parents=True, exist_ok=True)
        workdir = Path(tempfile.mkdtemp(prefix=FETCH_WORKDIR_PREFIX, dir=self._temp_root))
        try:
            logger.info("Downloading workbook from %s", self._url)
            target = workdir / "download.xlsx"
            try:
                response = self._session.get(self._url, timeout=self._timeout, stream=True)
                response.raise_for_status()
                logger.info("HTTP %s, Content-Type: %s", response.status_code, response.headers.get("content-type"))
                with open(target, "wb") as f:
                    for chunk in response.iter_content(chunk_size=8192):
                        f.write(chunk)
            except requests.RequestException as e:
                raise FetchError(f"Download failed: {e}") from e

            payload = target.read_bytes()
            logger.info("Downloaded %d bytes", len(payload))
            return validate_payload(payload)
        finally:
            shutil.rmtree(workdir, ignore_errors=True)
