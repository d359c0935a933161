"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import DelaySeconds, PollAttempts

DEFAULT_MARKET_OPTIONS: tuple[str, ...] = (
    "US", "SE", "GB", "DE", "FR", "CA", "AU", "JP", "NO", "DK", "FI",
)


def _validate_market(value: str) -> str:
    upper = value.strip().upper()
    if len(upper) != 2 or not upper.isalpha():
        raise ValueError(ErrorMessages.INVALID_MARKET.format(market=value))
    return upper


class CatalogSettings(BaseModel):
    """Music catalog (Spotify Web API) configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    client_id: str = Field(
        default="", validation_alias=AliasChoices("client_id", "spotify_client_id")
    )
    client_secret: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("client_secret", "spotify_client_secret"),
    )
    market: str = Field(default="US", validation_alias=AliasChoices("market", "region"))
    api_base_url: str = "https://api.spotify.com/v1"
    token_url: str = "https://accounts.spotify.com/api/token"
    search_limit: int = Field(default=10, ge=1, le=50)
    request_timeout_s: float = Field(default=10.0, gt=0.0, le=60.0)
    max_attempts: int = Field(default=3, ge=1, le=10)

    @field_validator("market")
    @classmethod
    def validate_market(cls, v: str) -> str:
        return _validate_market(v)

    @property
    def has_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret.get_secret_value())


class OrchestrationSettings(BaseModel):
    """Timing of the device state machine.

    Delays are deliberately short and fixed; attempt counts are small and
    bounded so a sick device degrades the operation instead of hanging it.
    """

    model_config = SettingsConfigDict(frozen=True)

    settle_delay_s: DelaySeconds = 0.3
    activation_delay_s: DelaySeconds = 0.5
    poll_interval_s: DelaySeconds = 0.3
    poll_attempts: PollAttempts = 5
    append_play_delay_s: DelaySeconds = 1.0
    device_call_timeout_s: float = Field(default=10.0, gt=0.0, le=120.0)
    max_pending_operations: int = Field(default=32, ge=1, le=1000)
    skipped_display_limit: int = Field(default=5, ge=1, le=50)


class SearchSettings(BaseModel):
    """Candidate counts fetched per command before ranking."""

    model_config = SettingsConfigDict(frozen=True)

    add_track_candidates: int = Field(default=3, ge=1, le=50)
    album_candidates: int = Field(default=3, ge=1, le=50)
    playlist_candidates: int = Field(default=5, ge=1, le=50)


class BlacklistSettings(BaseModel):
    """Track blacklist: case-insensitive terms matched against name or artist."""

    model_config = SettingsConfigDict(frozen=True)

    terms: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("terms", mode="before")
    @classmethod
    def split_terms(cls, v: str | list[str] | tuple[str, ...]) -> tuple[str, ...]:
        """Accept a comma-separated string as well as a JSON array."""
        if isinstance(v, str):
            v = v.split(",")
        return tuple(term.strip() for term in v if term and term.strip())


class AdminSettings(BaseModel):
    """Where operational warnings go."""

    model_config = SettingsConfigDict(frozen=True)

    channel: str | None = None
    market_options: tuple[str, ...] = DEFAULT_MARKET_OPTIONS

    @field_validator("market_options", mode="before")
    @classmethod
    def normalise_markets(cls, v: str | list[str] | tuple[str, ...]) -> tuple[str, ...]:
        if isinstance(v, str):
            v = v.split(",")
        return tuple(_validate_market(m) for m in v if m and m.strip())


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - CATALOG__CLIENT_ID, CATALOG__CLIENT_SECRET, CATALOG__MARKET (nested)
    - ORCHESTRATION__POLL_ATTEMPTS, ORCHESTRATION__SETTLE_DELAY_S, etc.
    - BLACKLIST__TERMS (JSON array, e.g. ["nickelback"])
    - ADMIN__CHANNEL
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    orchestration: OrchestrationSettings = Field(default_factory=OrchestrationSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    blacklist: BlacklistSettings = Field(default_factory=BlacklistSettings)
    admin: AdminSettings = Field(default_factory=AdminSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
