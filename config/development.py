import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

SUPABASE_CONFIG = {
    "url": os.getenv("SUPABASE_URL", "http://localhost:54321"),
    "key": os.getenv("SUPABASE_KEY", ""),
    "attendance_table": os.getenv("ATTENDANCE_TABLE", "attendance"),
    "users_table": os.getenv("USERS_TABLE", "gym_users"),
    "history_limit": int(os.getenv("HISTORY_LIMIT", "10")),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
