"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_KM = 6371.0

MIN_TOLERANCE_RADIUS_METERS = 10
MAX_TOLERANCE_RADIUS_METERS = 200

STANDARD_WORKDAY_HOURS = 8

DEFAULT_TIMEZONE = "America/Mexico_City"
DEFAULT_LATE_TOLERANCE_MINUTES = 0

# Fallback length of an auto-closed session whose closing time precedes check-in.
AUTO_CLOSE_FALLBACK_HOURS = 1

# Per client IP on the check-in endpoint
DEFAULT_VALIDATE_RATE_LIMIT = "100 per minute"
