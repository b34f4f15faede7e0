"""Settings shared by every environment. Each value can be overridden from the environment."""

import os


def _flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
DEBUG = _flag("DEBUG")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "field_attendance"),
}

# Apply database/schema.sql (idempotent) and database/seed.sql on startup
AUTO_INIT_DB = _flag("AUTO_INIT_DB")
AUTO_SEED_DB = _flag("AUTO_SEED_DB")

JWT_SECRET = os.getenv("JWT_SECRET", "change-me-please-this-secret-must-be-long-enough-for-hs512")
JWT_EXPIRATION_SECONDS = int(os.getenv("JWT_EXPIRATION_SECONDS", "86400"))
TOKEN_CACHE_TTL_SECONDS = int(os.getenv("TOKEN_CACHE_TTL_SECONDS", "900"))

LOGIN_MAX_ATTEMPTS = int(os.getenv("LOGIN_MAX_ATTEMPTS", "5"))
LOGIN_LOCKOUT_SECONDS = int(os.getenv("LOGIN_LOCKOUT_SECONDS", "900"))

FILE_STORAGE_PATH = os.getenv("FILE_STORAGE_PATH", "uploads")
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

OFFICE_START_TIME = os.getenv("OFFICE_START_TIME", "10:00")
OFFICE_END_TIME = os.getenv("OFFICE_END_TIME", "18:00")

FACE_RECOGNITION_ENABLED = _flag("FACE_RECOGNITION_ENABLED")
FACE_RECOGNITION_API_URL = os.getenv("FACE_RECOGNITION_API_URL", "")
FACE_RECOGNITION_TIMEOUT_SECONDS = int(os.getenv("FACE_RECOGNITION_TIMEOUT_SECONDS", "30"))
FACE_RECOGNITION_WORKERS = int(os.getenv("FACE_RECOGNITION_WORKERS", "5"))
FACE_RECOGNITION_QUEUE_CAPACITY = int(os.getenv("FACE_RECOGNITION_QUEUE_CAPACITY", "100"))

BINLOG_ENABLED = _flag("BINLOG_ENABLED")
BINLOG_SERVER_ID = int(os.getenv("BINLOG_SERVER_ID", "100"))
BINLOG_TABLE = os.getenv("BINLOG_TABLE", "wff_location_tracking")
BINLOG_RETRY_INITIAL_SECONDS = float(os.getenv("BINLOG_RETRY_INITIAL_SECONDS", "1"))
BINLOG_RETRY_MAX_SECONDS = float(os.getenv("BINLOG_RETRY_MAX_SECONDS", "60"))

# Accounts that can always log in; provisioned into users on first login
BUILTIN_ACCOUNTS = [
    {
        "username": os.getenv("MASTER_ADMIN_USERNAME", "MasterAdmin"),
        "password": os.getenv("MASTER_ADMIN_PASSWORD", "Admin@123"),
        "email": os.getenv("MASTER_ADMIN_EMAIL", "masteradmin@example.com"),
        "role": "admin",
    },
    {
        "username": os.getenv("DEFAULT_USER_USERNAME", "user"),
        "password": os.getenv("DEFAULT_USER_PASSWORD", "pass"),
        "email": os.getenv("DEFAULT_USER_EMAIL", "user@example.com"),
        "role": "employee",
    },
]
