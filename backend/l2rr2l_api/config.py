"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Settings are passed into create_app(); no call site reads os.environ

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Deployment mode accepts NODE_ENV for parity with the web client's tooling
"""

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from l2rr2l_api.core.cors_policy import PRODUCTION_MODE


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False,
        populate_by_name=True, extra="ignore",
    )

    # Server
    host: str = "0.0.0.0"  # nosec B104: listen on all interfaces
    port: int = Field(3001, ge=0, le=65535)

    # Deployment mode — "production" disables cross-origin access
    deployment_mode: str = Field(
        "development",
        validation_alias=AliasChoices("NODE_ENV", "DEPLOYMENT_MODE"),
    )

    # Body parsing
    json_body_limit_bytes: int = Field(100 * 1024, gt=0)
    json_strict: bool = True

    # Voice provider (ElevenLabs)
    elevenlabs_api_key: str | None = None
    elevenlabs_base_url: str = "https://api.elevenlabs.io"
    elevenlabs_timeout_seconds: float = 30.0
    elevenlabs_max_retries: int = Field(2, ge=0)
    elevenlabs_base_delay_ms: int = 500
    elevenlabs_max_delay_ms: int = 8_000

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("elevenlabs_api_key", mode="before")
    @classmethod
    def blank_key_is_unset(cls, v: str | None) -> str | None:
        """An empty ELEVENLABS_API_KEY= line means not configured."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def is_production(self) -> bool:
        return self.deployment_mode == PRODUCTION_MODE


@lru_cache
def get_settings() -> Settings:
    return Settings()
