"""
Settings for the identity core.

Concrete configuration built on Pydantic settings. Values come from
``IDENTITY_*`` environment variables or an optional ``.env`` file.
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class IdentitySettings(BaseSettings):
    """Runtime policy for users, sessions, OTPs and permission caching."""

    model_config = SettingsConfigDict(
        env_prefix="IDENTITY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Account lockout
    max_failed_login_attempts: int = Field(default=5, ge=1)
    lockout_duration_minutes: int = Field(default=30, ge=1)

    # Sessions
    session_ttl_minutes: int = Field(default=480, ge=1)  # 8 hours
    session_token_bytes: int = Field(default=32, ge=16)

    # One-time passcodes
    otp_ttl_minutes: int = Field(default=15, ge=1)
    otp_max_attempts: int = Field(default=3, ge=1)
    used_otp_retention_hours: int = Field(default=24, ge=0)
    otp_max_requests_per_window: int = Field(default=5, ge=0)  # 0 disables throttling
    otp_request_window_minutes: int = Field(default=60, ge=1)

    # Maintenance
    cleanup_org_ids: List[str] = Field(default_factory=lambda: ["default"])

    # Permission cache
    redis_url: Optional[str] = Field(default=None)
    permission_cache_ttl_seconds: int = Field(default=600, ge=1)  # 10 minutes
    cache_key_prefix: str = Field(default="neo_identity")

    # Persistence
    db_schema: str = Field(default="identity")

    @field_validator("db_schema")
    @classmethod
    def validate_schema(cls, value: str) -> str:
        if not value.replace("_", "").isalnum():
            raise ValueError(f"Invalid schema name: {value}")
        return value


@lru_cache()
def get_settings() -> IdentitySettings:
    """Get cached settings instance."""
    return IdentitySettings()
