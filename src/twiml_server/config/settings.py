"""Application-wide configuration loading and validation."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Centralized environment configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["local", "dev", "prod"] = Field(default="local")
    log_level: str = Field(default="INFO")

    # Twilio
    twilio_auth_token: str | None = Field(
        default=None,
        description="Signing secret used to validate X-Twilio-Signature headers.",
    )
    public_base_url: str | None = Field(
        default=None,
        description="Public base URL for Twilio webhooks (e.g. https://<ngrok>.ngrok-free.app).",
    )

    # Routing
    prefix_routes_with_type: bool = Field(
        default=True,
        description="Prefix every route with its request kind (voice/messaging/fax).",
    )

    @field_validator("public_base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.rstrip("/") or None

    @property
    def is_production(self) -> bool:
        return self.environment == "prod"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
