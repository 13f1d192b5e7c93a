import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "worktime_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Working-time policy
DEFAULT_SLA_HOURS = float(os.getenv("DEFAULT_SLA_HOURS", "8"))
ACK_WINDOW_MINUTES = int(os.getenv("ACK_WINDOW_MINUTES", "30"))
URGENT_THRESHOLD_MINUTES = int(os.getenv("URGENT_THRESHOLD_MINUTES", "120"))

# Apply database/schema.sql (and seed.sql) on startup
AUTO_INIT_DB = os.getenv("AUTO_INIT_DB", "0") == "1"
AUTO_SEED_DB = os.getenv("AUTO_SEED_DB", "0") == "1"
