import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "campus_attendance_test"),
}

EMAILJS = {
    "service_id": "service_test",
    "template_id": "template_absent_test",
    "otp_template_id": "template_otp_test",
    "public_key": "test-public-key",
    "private_key": "",
}

AUTHORIZED_IPS = []
IP_LOOKUP_ENABLED = False

STAFF_DEFAULT_PASSWORD = "admin123"

NOTIFY_DELAY_SECONDS = 0.0

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
