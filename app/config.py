"""Configuration settings for Hoaxify."""

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./hoaxify.db")

    # Authentication tokens
    AUTH_TOKEN_TTL_DAYS: int = int(os.getenv("AUTH_TOKEN_TTL_DAYS", "7"))
    TOKEN_CLEANUP_INTERVAL_SECONDS: int = int(os.getenv("TOKEN_CLEANUP_INTERVAL_SECONDS", "3600"))

    # Password reset
    PASSWORD_RESET_EXPIRE_MINUTES: int = int(os.getenv("PASSWORD_RESET_EXPIRE_MINUTES", "30"))

    # Profile images
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "uploads")
    PROFILE_DIR: str = os.getenv("PROFILE_DIR", "profile")
    MAX_PROFILE_IMAGE_BYTES: int = int(os.getenv("MAX_PROFILE_IMAGE_BYTES", str(2 * 1024 * 1024)))

    # Mail
    MAIL_ENABLED: bool = os.getenv("MAIL_ENABLED", "true").lower() == "true"
    SMTP_HOST: str = os.getenv("SMTP_HOST", "localhost")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "8587"))
    SMTP_USERNAME: str = os.getenv("SMTP_USERNAME", "")
    SMTP_PASSWORD: str = os.getenv("SMTP_PASSWORD", "")
    SMTP_USE_TLS: bool = os.getenv("SMTP_USE_TLS", "false").lower() == "true"
    MAIL_FROM: str = os.getenv("MAIL_FROM", "Hoaxify <info@hoaxify.com>")
    TEMPLATE_DIR: str = os.getenv("TEMPLATE_DIR", str(PROJECT_ROOT / "templates"))

    # Application
    APP_BASE_URL: str = os.getenv("APP_BASE_URL", "http://localhost:8080")
    DEFAULT_LOCALE: str = os.getenv("DEFAULT_LOCALE", "en")
    APP_ENV: str = os.getenv("APP_ENV", "development")
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    @property
    def profile_image_dir(self) -> Path:
        return Path(self.UPLOAD_DIR) / self.PROFILE_DIR

    def validate(self) -> list[str]:
        """Validate settings and return list of warnings."""
        warnings = []
        if not self.MAIL_ENABLED:
            warnings.append("MAIL_ENABLED is false - activation and reset mails are only logged")
        if self.SMTP_USERNAME and not self.SMTP_PASSWORD:
            warnings.append("SMTP_USERNAME is set without SMTP_PASSWORD - SMTP login will be skipped")
        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
