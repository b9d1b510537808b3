import os
import tempfile

SECRET_KEY = "test-secret"

SPREADSHEET_URL = ""
SPREADSHEET_COOKIE = ""
SPREADSHEET_FILE = os.getenv("SPREADSHEET_FILE", "")

DOWNLOAD_DIR = os.path.join(tempfile.gettempdir(), "pep_attendance_test")
TEMP_ROOT = tempfile.gettempdir()
TIMEZONE = "Asia/Kolkata"

REFRESH_INTERVAL_SECONDS = 600
REFRESH_TIMEOUT_SECONDS = 5
CLEANUP_INTERVAL_SECONDS = 1800
ARTIFACT_MAX_AGE_SECONDS = 3600

DEBUG = False
TESTING = True

AUTO_START_SCHEDULER = False
