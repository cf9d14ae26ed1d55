from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict


# Load .env early for local development
load_dotenv()


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True)

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./murabaat.db")

    # Security
    app_secret_key: str = os.getenv("APP_SECRET_KEY", "dev-secret-change-me")
    access_token_exp_minutes: int = int(os.getenv("ACCESS_TOKEN_EXP_MINUTES", str(60 * 24)))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_dir: str = os.getenv("LOG_DIR", "./logs")

    # Rate limits (requests per window, per client IP)
    rate_limit_window_seconds: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))
    login_rate_limit: int = int(os.getenv("LOGIN_RATE_LIMIT", "10"))
    review_rate_limit: int = int(os.getenv("REVIEW_RATE_LIMIT", "5"))
    report_rate_limit: int = int(os.getenv("REPORT_RATE_LIMIT", "5"))
    company_request_rate_limit: int = int(os.getenv("COMPANY_REQUEST_RATE_LIMIT", "3"))

    # Listings
    default_page_size: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))


settings = Settings()
