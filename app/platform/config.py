from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ─────────────────────────────────────
    APP_NAME: str = "Lara4"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = True

    # Where users land after login/logout and on any auth failure
    FRONTEND_URL: str = "http://localhost:3000"

    # ── Database ────────────────────────────────
    DATABASE_URL: str

    # ── Email Configuration ─────────────────────
    MAIL_MAILER: str = "smtp"
    MAIL_HOST: str = "smtp.gmail.com"
    MAIL_PORT: int = 587
    MAIL_USERNAME: str = "your-email-id"
    MAIL_PASSWORD: str = "your-password"
    MAIL_ENCRYPTION: str = "tls"
    MAIL_FROM_ADDRESS: str = "example@localhost"
    MAIL_FROM_NAME: str = "Lara4"

    EMAIL_RELAY_URL: str = ""
    EMAIL_RELAY_API_KEY: str = ""
    EMAIL_RELAY_TIMEOUT: int = 30

    # ── Social login ────────────────────────────
    GOOGLE_CLIENT_ID: str = "dummy-value"
    GOOGLE_CLIENT_SECRET: str = "dummy-value"
    GITHUB_CLIENT_ID: str = "dummy-value"
    GITHUB_CLIENT_SECRET: str = "dummy-value"

    # Callback URL is "{OAUTH_REDIRECT_BASE_URL}/{provider}/callback"
    OAUTH_REDIRECT_BASE_URL: str = "http://localhost:8000/api/v1/auth"
    OAUTH_STATE_TTL_SECONDS: int = 600
    OAUTH_HTTP_TIMEOUT: int = 15

    # ── JWT / Session ───────────────────────────
    JWT_SECRET_KEY: str = "your-secret-key-change-this-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 1440
    ALGORITHM: str = "HS256"

    SESSION_COOKIE_NAME: str = "lara4_session"
    SESSION_COOKIE_SECURE: bool = False
    OAUTH_STATE_COOKIE_NAME: str = "lara4_oauth_state"

    # ── Feed ────────────────────────────────────
    FEED_TITLE: str = "Lara4 Blog RSS Feed"
    FEED_DESCRIPTION: str = "The Lara4 Blog RSS feed"
    FEED_LANGUAGE: str = "en-US"
    FEED_BASE_URL: str = "http://localhost:8000"
    FEED_ITEM_LIMIT: int = 50

    COUNTRY_HEADER: Optional[str] = "cf-ipcountry"

    class Config:
        env_file = str(Path(__file__).parent.parent.parent / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
