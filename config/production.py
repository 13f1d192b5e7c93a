import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "worktime"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "worktime_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEFAULT_SLA_HOURS = float(os.getenv("DEFAULT_SLA_HOURS", "8"))
ACK_WINDOW_MINUTES = int(os.getenv("ACK_WINDOW_MINUTES", "30"))
URGENT_THRESHOLD_MINUTES = int(os.getenv("URGENT_THRESHOLD_MINUTES", "120"))
