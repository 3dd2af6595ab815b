import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "branch_attendance"),
}

# No defaults: an unset secret rejects every request.
API_SECRET = os.getenv("API_SECRET")
CRON_SECRET = os.getenv("CRON_SECRET")

DEFAULT_TIMEZONE = os.getenv("DEFAULT_TIMEZONE", "America/Mexico_City")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

# Per client IP on /api/attendance/validate (Flask-Limiter syntax)
VALIDATE_RATE_LIMIT = os.getenv("VALIDATE_RATE_LIMIT", "100 per minute")
# Use a shared backend (e.g. redis://) when running several workers
RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
