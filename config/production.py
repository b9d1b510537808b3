import os

from .config import Config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

SPREADSHEET_URL = Config.SPREADSHEET_URL
SPREADSHEET_COOKIE = Config.SPREADSHEET_COOKIE
SPREADSHEET_FILE = Config.SPREADSHEET_FILE

DOWNLOAD_DIR = Config.DOWNLOAD_DIR
TEMP_ROOT = Config.TEMP_ROOT
TIMEZONE = Config.TIMEZONE

REFRESH_INTERVAL_SECONDS = Config.REFRESH_INTERVAL_SECONDS
REFRESH_TIMEOUT_SECONDS = Config.REFRESH_TIMEOUT_SECONDS
CLEANUP_INTERVAL_SECONDS = Config.CLEANUP_INTERVAL_SECONDS
ARTIFACT_MAX_AGE_SECONDS = Config.ARTIFACT_MAX_AGE_SECONDS

DEBUG = False

AUTO_START_SCHEDULER = bool(int(os.getenv("AUTO_START_SCHEDULER", "1")))
