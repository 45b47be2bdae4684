"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Missing record-store credentials are reported, never defaulted

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings; credentials default to None so the
      lifespan can fail fast with ConfigurationError naming what is missing
"""

from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from record_gateway.core.domain_types import GatewayProfileName


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Record store
    sf_instance_url: str | None = None
    sf_access_token: str | None = None
    sf_api_version: str = "v59.0"
    sf_timeout_seconds: float = 30.0
    verify_record_store_on_startup: bool = True

    @field_validator("sf_instance_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        """Instance URLs are joined with /services/data/..., so no trailing slash."""
        if isinstance(v, str):
            v = v.strip().rstrip("/")
            return v or None
        return v

    # Gateway
    gateway_profile: GatewayProfileName = GatewayProfileName.CLIENT_REQUESTS
    environment: Literal["development", "production"] = "development"

    # Messaging
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_use_tls: bool = True
    mail_from: str = "noreply@example.com"
    mail_recipient_override: str | None = None

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_request_bodies: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def missing_record_store_settings(self) -> list[str]:
        """Names of required record-store settings that are unset."""
        missing = []
        if not self.sf_instance_url:
            missing.append("SF_INSTANCE_URL")
        if not self.sf_access_token:
            missing.append("SF_ACCESS_TOKEN")
        return missing


@lru_cache
def get_settings() -> Settings:
    return Settings()
