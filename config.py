import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./studiq.db")
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")

    # Public app identity (used in outgoing emails)
    APP_NAME = data.get("APP_NAME", "StudIQ")
    APP_URL = data.get("APP_URL", "http://localhost:3000")

    # SMTP transport
    SMTP_HOST = data.get("SMTP_HOST", "")
    SMTP_PORT = data.get("SMTP_PORT", 587)
    SMTP_USER = data.get("SMTP_USER", "")
    SMTP_PASSWORD = data.get("SMTP_PASSWORD", "")
    SMTP_FROM = data.get("SMTP_FROM", "")
    SMTP_START_TLS = bool(data.get("SMTP_START_TLS", True))
    EMAIL_MAX_ATTEMPTS = data.get("EMAIL_MAX_ATTEMPTS", 3)
    EMAIL_RETRY_BASE_SECONDS = data.get("EMAIL_RETRY_BASE_SECONDS", 1.0)
    EMAIL_TIMEOUT_SECONDS = data.get("EMAIL_TIMEOUT_SECONDS", 30.0)

    # Rate limiting ("memory" or "redis")
    RATE_LIMIT_BACKEND = data.get("RATE_LIMIT_BACKEND", "memory")
    RATE_LIMIT_GC_INTERVAL_SECONDS = data.get("RATE_LIMIT_GC_INTERVAL_SECONDS", 300)
    PASSWORD_RESET_RATE_LIMIT_WINDOW_SECONDS = data.get(
        "PASSWORD_RESET_RATE_LIMIT_WINDOW_SECONDS", 15 * 60
    )
    PASSWORD_RESET_MAX_PER_EMAIL = data.get("PASSWORD_RESET_MAX_PER_EMAIL", 3)
    PASSWORD_RESET_MAX_PER_ORIGIN_EMAIL = data.get("PASSWORD_RESET_MAX_PER_ORIGIN_EMAIL", 3)

    # Password reset tokens
    PASSWORD_RESET_TOKEN_TTL_MINUTES = data.get("PASSWORD_RESET_TOKEN_TTL_MINUTES", 15)
    PASSWORD_RESET_SURFACE_STORE_ERRORS = bool(
        data.get("PASSWORD_RESET_SURFACE_STORE_ERRORS", False)
    )

    # Timeout applied to every collaborator call (DB, SMTP)
    EXTERNAL_CALL_TIMEOUT_SECONDS = data.get("EXTERNAL_CALL_TIMEOUT_SECONDS", 10.0)
