import os


def env_int(name: str, default: int) -> int:
    return int(os.environ.get(name, str(default)))


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "pep-attendance-dev-key"

    # Nguồn bảng tính: URL chia sẻ (tải trực tiếp) hoặc file cục bộ
    SPREADSHEET_URL = os.environ.get("SPREADSHEET_URL", "")
    SPREADSHEET_COOKIE = os.environ.get("SPREADSHEET_COOKIE", "")
    SPREADSHEET_FILE = os.environ.get("SPREADSHEET_FILE", "")

    DOWNLOAD_DIR = os.environ.get("DOWNLOAD_DIR", "/tmp/attendance")
    TEMP_ROOT = os.environ.get("TEMP_ROOT", "/tmp")
    TIMEZONE = os.environ.get("TIMEZONE", "Asia/Kolkata")

    REFRESH_INTERVAL_SECONDS = env_int("REFRESH_INTERVAL_SECONDS", 10 * 60)
    REFRESH_TIMEOUT_SECONDS = env_int("REFRESH_TIMEOUT_SECONDS", 120)
    CLEANUP_INTERVAL_SECONDS = env_int("CLEANUP_INTERVAL_SECONDS", 30 * 60)
    ARTIFACT_MAX_AGE_SECONDS = env_int("ARTIFACT_MAX_AGE_SECONDS", 60 * 60)
