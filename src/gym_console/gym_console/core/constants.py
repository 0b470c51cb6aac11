"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_HISTORY_LIMIT = 10
DEFAULT_RECENT_ROWS = 5
DEFAULT_TREND_DAYS = 7

ATTENDANCE_TABLE = "attendance"
USERS_TABLE = "gym_users"
REALTIME_SCHEMA = "public"

NO_RECORDS_MESSAGE = "No attendance records found"
NO_RECORDS_FOR_DATE_MESSAGE = "No attendance records for this date."
UNKNOWN_USER_NAME = "Unknown"
REALTIME_UPDATE_NOTICE = "Attendance updated in real-time."
REALTIME_UNAVAILABLE_NOTICE = "Live updates are unavailable, showing the last loaded data."
