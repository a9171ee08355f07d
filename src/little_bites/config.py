"""Application configuration."""

import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from little_bites.domain.grading import AgeGroup

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    fatsecret_client_id: str
    fatsecret_client_secret: str
    fatsecret_base_url: str = "https://platform.fatsecret.com/rest/server.api"
    fatsecret_token_url: str = "https://oauth.fatsecret.com/connect/token"
    fatsecret_timeout_seconds: float = 10
    supabase_url: str
    supabase_service_key: str
    admin_token: str
    cache_expiry_hours: int = 24
    max_scan_history: int = 100
    enable_caching: bool = True
    default_age_group: str = AgeGroup.INFANT.value
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @field_validator("default_age_group")
    @classmethod
    def check_default_age_group(cls, value: str) -> str:
        group = parse_age_group(value)
        if group is None:
            raise ValueError(f"Unknown age group: {value!r}")
        return group.value


def parse_age_group(raw: str | None) -> AgeGroup | None:
    """Map picker or env text to a recognized age group."""
    if raw is None:
        return None
    cleaned = raw.strip().lower().replace(" ", "")
    if not cleaned:
        return None
    for group in AgeGroup:
        if cleaned == group.value:
            return group
    return None
