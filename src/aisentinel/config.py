"""Application configuration and constants"""
import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str) -> list[str]:
    return [item.strip() for item in os.getenv(name, "").split(",") if item.strip()]


# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./aisentinel.db")

# Environment
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
IS_PRODUCTION = ENVIRONMENT == "production"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
APP_BASE_URL = os.getenv("APP_BASE_URL", "http://localhost:8000").rstrip("/")

# Sessions
SESSION_TTL_DAYS = int(os.getenv("SESSION_TTL_DAYS", "30"))
SESSION_COOKIE_NAME = "sessionToken"
SESSION_HEADER_NAME = "X-Session-Token"
SESSION_COOKIE_MAX_AGE = SESSION_TTL_DAYS * 24 * 3600  # 2592000 for 30 days
COOKIE_SECURE = IS_PRODUCTION

# Email verification
EMAIL_TOKEN_TTL_HOURS = int(os.getenv("EMAIL_TOKEN_TTL_HOURS", "1"))
SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME = os.getenv("SMTP_USERNAME")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
SMTP_SENDER = os.getenv("SMTP_SENDER", "noreply@aisentinel.app")

# Developer impersonation
DEVELOPER_EMAILS = [email.lower() for email in _env_list("DEVELOPER_EMAILS")]

# Development login is never available in production
DEV_LOGIN_ENABLED = _env_flag("DEV_LOGIN_ENABLED") and not IS_PRODUCTION
# "email:role" pairs, e.g. "owner@example.com:owner,user@example.com:user"
DEV_LOGIN_ACCOUNTS = {
    pair.split(":", 1)[0].strip().lower(): pair.split(":", 1)[1].strip()
    for pair in _env_list("DEV_LOGIN_ACCOUNTS")
    if ":" in pair
}

# Anonymous callers see the demo tenant
DEMO_COMPANY_ID = int(os.getenv("DEMO_COMPANY_ID", "1"))
