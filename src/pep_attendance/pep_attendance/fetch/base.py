from __future__ import annotations

from typing import Protocol

from ..core.constants import MIN_PAYLOAD_BYTES
from ..core.exceptions import FetchError


class SpreadsheetFetcher(Protocol):
    def fetch(self) -> bytes:
        """Return the raw workbook bytes or raise FetchError."""

        raise NotImplementedError


def validate_payload(payload: bytes, *, min_bytes: int = MIN_PAYLOAD_BYTES) -> bytes:
    if not payload:
        raise FetchError("Empty download")
    if len(payload) < min_bytes:
        raise FetchError(f"File too small: {len(payload)} bytes")

    head = payload[:100].decode("utf-8", errors="ignore")
    if "<!DOCTYPE" in head or "<html" in head:
        raise FetchError("Received HTML instead of Excel file")
    return payload
