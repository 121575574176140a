import os

from config import env_list

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "campus_attendance"),
}

# EmailJS credentials (placeholders keep sending disabled)
EMAILJS = {
    "service_id": os.getenv("EMAILJS_SERVICE_ID", "service_attendance_system"),
    "template_id": os.getenv("EMAILJS_TEMPLATE_ID", "template_absent_alert"),
    "otp_template_id": os.getenv("EMAILJS_OTP_TEMPLATE_ID", "template_otp_verification"),
    "public_key": os.getenv("EMAILJS_PUBLIC_KEY", "your_emailjs_public_key"),
    "private_key": os.getenv("EMAILJS_PRIVATE_KEY", ""),
}

# Empty list disables the network gate
AUTHORIZED_IPS = env_list("AUTHORIZED_IPS")
IP_LOOKUP_ENABLED = bool(int(os.getenv("IP_LOOKUP_ENABLED", "0")))

# Accepted until a staff password has been stored
STAFF_DEFAULT_PASSWORD = os.getenv("STAFF_DEFAULT_PASSWORD", "admin123")

NOTIFY_DELAY_SECONDS = float(os.getenv("NOTIFY_DELAY_SECONDS", "0.1"))

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo students on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
