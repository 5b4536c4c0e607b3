import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"

DEFAULT_JWT_SECRET = "super_secret_key_123"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> list:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


class Config:
    PORT = int(os.getenv("PORT", "3000"))
    DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'database.db'}")

    JWT_SECRET = os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET)
    JWT_EXPIRES_SECONDS = int(os.getenv("JWT_EXPIRES_SECONDS", "3600"))
    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))
    COOKIE_SECURE = _env_bool("COOKIE_SECURE", False)

    CORS_ORIGINS = _env_list("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000")

    # Flask-Limiter reads the RATELIMIT_* keys directly
    RATELIMIT_ENABLED = _env_bool("RATE_LIMIT_ENABLED", True)
    RATELIMIT_STORAGE_URI = "memory://"
    RATELIMIT_STRATEGY = "fixed-window"
    RATELIMIT_HEADERS_ENABLED = True
    RATE_LIMIT_DEFAULT = os.getenv("RATE_LIMIT_DEFAULT", "100 per 15 minutes")
    RATE_LIMIT_JOB_WRITES = os.getenv("RATE_LIMIT_JOB_WRITES", "20 per 15 minutes")

    HSTS_ENABLED = _env_bool("HSTS_ENABLED", False)
    FRONTEND_DIST = os.getenv("FRONTEND_DIST", str(BASE_DIR / "frontend" / "dist"))

    SEED_DATABASE = _env_bool("SEED_DATABASE", True)
    ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@mail.com")
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin")

    BACKUP_INTERVAL_SECONDS = int(os.getenv("BACKUP_INTERVAL_SECONDS", "86400"))
    BACKUP_DIR = os.getenv("BACKUP_DIR", str(DATA_DIR / "db_backup"))
    BACKUP_KEEP = int(os.getenv("BACKUP_KEEP", "7"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
