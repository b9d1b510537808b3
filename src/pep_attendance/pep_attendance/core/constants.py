"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TIMEZONE = "Asia/Kolkata"

# Term rules
REQUIRED_CLASSES = 24
DEFAULT_TOTAL_CLASSES = 30
OPEN_ENDED_TERM_MARKERS = ("REPUBLIC",)
TERM_ENDED_GRACE_DAYS = 7
TERM_STALE_DAYS = 30

# Weekly window (Mon-Fri, 3 compulsory)
WEEKLY_REQUIRED_DAYS = 3
WEEKLY_TOTAL_DAYS = 5

# Spreadsheet layout
HEADER_SCAN_ROWS = 10
TERM_MARKER_ROW_OFFSET = 2
DEFAULT_NAME_COL = 2
DEFAULT_ROLL_COL = 3
MIN_NAME_LENGTH = 2
MIN_ROLL_LENGTH = 3
EXCEL_EPOCH_SERIAL = 25569
SECONDS_PER_DAY = 86400
SERIAL_DATE_MIN = 40000
SERIAL_DATE_MAX = 50000

# Cache lifecycle
REFRESH_INTERVAL_SECONDS = 10 * 60
REFRESH_TIMEOUT_SECONDS = 120
CLEANUP_INTERVAL_SECONDS = 30 * 60
ARTIFACT_MAX_AGE_SECONDS = 60 * 60
ARTIFACT_PREFIX = "attendance_"
FETCH_WORKDIR_PREFIX = "pep_fetch_"
MIN_PAYLOAD_BYTES = 1000
