import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

SUPABASE_CONFIG = {
    "url": os.getenv("SUPABASE_URL", ""),
    "key": os.getenv("SUPABASE_KEY", ""),
    "attendance_table": os.getenv("ATTENDANCE_TABLE", "attendance"),
    "users_table": os.getenv("USERS_TABLE", "gym_users"),
    "history_limit": int(os.getenv("HISTORY_LIMIT", "10")),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
