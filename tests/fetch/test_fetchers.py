import pytest
import requests

from src.pep_attendance.pep_attendance.core.exceptions import FetchError
from src.pep_attendance.pep_attendance.fetch.base import validate_payload
from src.pep_attendance.pep_attendance.fetch.file_fetcher import FileSpreadsheetFetcher
from src.pep_attendance.pep_attendance.fetch.http_fetcher import HttpSpreadsheetFetcher

XLSX = b"PK\x03\x04" + b"\x00" * 2000


class FakeResponse:
    def __init__(self, body, status_code=200):
        self.body = body
        self.status_code = status_code
        self.headers = {"content-type": "application/octet-stream"}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Client Error")

    def iter_content(self, chunk_size=8192):
        for i in range(0, len(self.body), chunk_size):
            yield self.body[i : i + chunk_size]


class FakeSession:
    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error:
            raise self.error
        return self.response


@pytest.mark.parametrize(
    "payload,message",
    [
        (b"", "Empty download"),
        (b"PK" * 10, "File too small"),
        (b"<!DOCTYPE html><html>" + b" " * 2000, "HTML"),
    ],
)
def test_validate_payload_rejects(payload, message):
    with pytest.raises(FetchError) as exc:
        validate_payload(payload)

    assert message in str(exc.value)


def test_validate_payload_accepts_workbook_bytes():
    assert validate_payload(XLSX) == XLSX


def test_file_fetcher(tmp_path):
    path = tmp_path / "sheet.xlsx"
    path.write_bytes(XLSX)

    assert FileSpreadsheetFetcher(path).fetch() == XLSX


def test_file_fetcher_missing_file(tmp_path):
    with pytest.raises(FetchError):
        FileSpreadsheetFetcher(tmp_path / "missing.xlsx").fetch()


def test_http_fetcher_downloads_and_cleans_workdir(tmp_path):
    session = FakeSession(FakeResponse(XLSX))
    fetcher = HttpSpreadsheetFetcher("https://example.org/sheet.xlsx", temp_root=tmp_path, cookie="a=b", session=session)

    assert fetcher.fetch() == XLSX
    assert session.headers["Cookie"] == "a=b"
    assert "Mozilla" in session.headers["User-Agent"]
    assert session.calls[0][1]["stream"] is True
    assert list(tmp_path.iterdir()) == []


def test_http_fetcher_wraps_request_errors(tmp_path):
    session = FakeSession(error=requests.ConnectionError("refused"))
    fetcher = HttpSpreadsheetFetcher("https://example.org/sheet.xlsx", temp_root=tmp_path, session=session)

    with pytest.raises(FetchError) as exc:
        fetcher.fetch()

    assert "refused" in str(exc.value)
    assert list(tmp_path.iterdir()) == []


def test_http_fetcher_rejects_login_page(tmp_path):
    page = b"<!DOCTYPE html><html>sign in</html>" + b" " * 2000
    fetcher = HttpSpreadsheetFetcher(
        "https://example.org/sheet.xlsx", temp_root=tmp_path, session=FakeSession(FakeResponse(page))
    )

    with pytest.raises(FetchError, match="HTML"):
        fetcher.fetch()


def test_http_fetcher_http_error(tmp_path):
    fetcher = HttpSpreadsheetFetcher(
        "https://example.org/sheet.xlsx", temp_root=tmp_path, session=FakeSession(FakeResponse(b"", 403))
    )

    with pytest.raises(FetchError, match="Download failed"):
        fetcher.fetch()


def test_http_fetcher_without_url(tmp_path):
    with pytest.raises(FetchError):
        HttpSpreadsheetFetcher("", temp_root=tmp_path, session=FakeSession()).fetch()
