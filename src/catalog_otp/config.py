"""Catalog OTP service — configuration loaded from environment."""

from datetime import timedelta

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, loaded from .env or environment variables.

    OTP values must be positive; anything else fails validation at startup.
    """

    # ── OTP ───────────────────────────────────────────────
    otp_length: int = Field(6, gt=0)
    otp_expiry_minutes: int = Field(5, gt=0)
    otp_allowed_attempts: int = Field(3, gt=0)

    # ── Cache ─────────────────────────────────────────────
    cache_sweep_interval_seconds: float = Field(60, gt=0)

    # ── SMTP (empty host → codes are logged, not mailed) ──
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    email_from: str = "no-reply@catalog.local"

    # ── App ───────────────────────────────────────────────
    app_name: str = "Product Catalog"
    debug: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def otp_expiry(self) -> timedelta:
        return timedelta(minutes=self.otp_expiry_minutes)


# Singleton settings instance
settings = Settings()
