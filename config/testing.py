import os

SECRET_KEY = "test-secret"

SUPABASE_CONFIG = {
    "url": os.getenv("SUPABASE_URL", "http://localhost:54321"),
    "key": os.getenv("SUPABASE_KEY", "test-key"),
    "attendance_table": "attendance",
    "users_table": "gym_users",
    "history_limit": 10,
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
