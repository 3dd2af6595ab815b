import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "branch_attendance_test"),
}

API_SECRET = "test-api-secret"
CRON_SECRET = "test-cron-secret"

DEFAULT_TIMEZONE = "America/Mexico_City"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

VALIDATE_RATE_LIMIT = "5 per minute"
RATELIMIT_STORAGE_URI = "memory://"
