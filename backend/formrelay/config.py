"""
Process-wide configuration.

Loaded once from environment variables (and a .env file, if present) with
pydantic-settings before the app starts serving. The Settings snapshot is
frozen; nothing mutates it after import.

Environment variables
---------------------
ALLOWED_ORIGIN   CORS allow-list value (default: "*").
SMTP_HOST        SMTP server hostname.
SMTP_PORT        SMTP server port. 465 means implicit TLS.
SMTP_USER        SMTP login.
SMTP_PASS        SMTP password.
SMTP_FROM        From address override (default: the recipient address).
SMTP_FROM_NAME   Display name on the From header (default: "Breaking Dev Lab").
SMTP_TIMEOUT     Seconds allowed for one delivery attempt (default: 10).
TO_EMAIL         Recipient (default: SMTP_USER, then a fixed fallback).
PORT             Listening port (default: 10000).
LOG_LEVEL        Root logging level (default: INFO).

Mail delivery is only enabled when SMTP_HOST, SMTP_PORT, SMTP_USER and
SMTP_PASS are all set. Blank values count as unset.

Usage:
    from formrelay.config import settings
    print(settings.to_email)
"""

from typing import Any, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TO_EMAIL = "hello@breakingdevlab.example"
DEFAULT_FROM_NAME = "Breaking Dev Lab"


class Settings(BaseSettings):
    """Immutable configuration snapshot."""

    # -------------------------------------------------------------------------
    # HTTP
    # -------------------------------------------------------------------------

    allowed_origin: str = Field(default="*", description="CORS allow-list value")
    port: int = Field(default=10000, ge=1, le=65535, description="Listening port")
    log_level: str = Field(default="INFO", description="Root logging level")

    # -------------------------------------------------------------------------
    # SMTP
    # -------------------------------------------------------------------------
    # All four connection values are needed before a transport is built

    smtp_host: Optional[str] = None
    smtp_port: Optional[int] = Field(default=None, ge=1, le=65535)
    smtp_user: Optional[str] = None
    smtp_pass: Optional[str] = None
    smtp_from: Optional[str] = None
    smtp_from_name: str = DEFAULT_FROM_NAME
    smtp_timeout: float = Field(default=10.0, gt=0, description="Seconds per delivery attempt")

    # TO_EMAIL -> SMTP_USER -> DEFAULT_TO_EMAIL, resolved in _resolve_defaults
    to_email: str = DEFAULT_TO_EMAIL

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        # .env files may carry variables for other tools
        extra="ignore",
        frozen=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _resolve_defaults(cls, data: Any) -> Any:
        """Drop blank values so field defaults apply, then fill the recipient chain."""
        if not isinstance(data, dict):
            return data

        values = {
            key: value.strip() if isinstance(value, str) else value
            for key, value in data.items()
            if not (isinstance(value, str) and not value.strip())
        }
        if not values.get("to_email"):
            values["to_email"] = values.get("smtp_user") or DEFAULT_TO_EMAIL
        return values

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def smtp_configured(self) -> bool:
        """True when every credential needed to build a transport is present."""
        return bool(
            self.smtp_host and self.smtp_port and self.smtp_user and self.smtp_pass
        )

    @property
    def from_address(self) -> str:
        return self.smtp_from or self.to_email


# Global settings instance
settings = Settings()
