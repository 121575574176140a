"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

OTP_LENGTH = 6
OTP_TTL_MINUTES = 5
OTP_MAX_ATTEMPTS = 3

MIN_PASSWORD_LENGTH = 8
DEFAULT_STAFF_PASSWORD = "admin123"

NOTIFY_DELAY_SECONDS = 0.1
MAX_REPORTED_ERRORS = 100

SUBMIT_DEBOUNCE_SECONDS = 1.0
MAX_PHOTO_BYTES = 5 * 1024 * 1024

DEFAULT_SESSION_DAYS = 7

# Column widths in database/schema.sql
MAX_REG_NO_LENGTH = 32
MAX_NAME_LENGTH = 120
MAX_EMAIL_LENGTH = 190
