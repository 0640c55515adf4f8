"""Central configuration loaded from environment variables and an optional .env file."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from otpvault.auth.totp import DEFAULT_SECRET_BYTES
from otpvault.auth.uri import DEFAULT_ISSUER


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Encryption (64 hex chars = raw key, anything else is SHA-256 hashed)
    totp_encryption_key: str = ""

    # Provisioning
    totp_issuer: str = DEFAULT_ISSUER
    totp_secret_bytes: int = Field(default=DEFAULT_SECRET_BYTES, ge=DEFAULT_SECRET_BYTES)

    # Code parameters
    totp_digits: int = Field(default=6, gt=0, le=10)
    totp_period: int = Field(default=30, gt=0)
    totp_window: int = Field(default=1, ge=0)

    # Logging
    log_level: str = "INFO"


settings = Settings()
