import os

from config import env_list

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "campus_attendance"),
}

EMAILJS = {
    "service_id": os.getenv("EMAILJS_SERVICE_ID", ""),
    "template_id": os.getenv("EMAILJS_TEMPLATE_ID", ""),
    "otp_template_id": os.getenv("EMAILJS_OTP_TEMPLATE_ID", ""),
    "public_key": os.getenv("EMAILJS_PUBLIC_KEY", ""),
    "private_key": os.getenv("EMAILJS_PRIVATE_KEY", ""),
}

AUTHORIZED_IPS = env_list("AUTHORIZED_IPS")
IP_LOOKUP_ENABLED = bool(int(os.getenv("IP_LOOKUP_ENABLED", "0")))

STAFF_DEFAULT_PASSWORD = os.getenv("STAFF_DEFAULT_PASSWORD", "admin123")

NOTIFY_DELAY_SECONDS = float(os.getenv("NOTIFY_DELAY_SECONDS", "0.1"))

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
