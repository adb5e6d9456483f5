"""Lightweight configuration for the Outpost client layer."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Minimal application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="OUTPOST_"
    )

    gateway_url: str = Field(
        default="http://127.0.0.1:5001/functions",
        description="Base URL of the simulation's callable command endpoints",
    )
    world_id: str = Field(default="default", description="World the commands are addressed to")
    auth_token: str | None = Field(
        default=None, description="Bearer token identifying the acting player to the backend"
    )
    gateway_timeout_seconds: float | None = Field(
        default=None,
        description="Per-request timeout for command submission; None waits indefinitely",
        gt=0.0,
    )
    demobilise_close_delay_seconds: float = Field(
        default=2.0,
        description="Delay before a successful demobilise flow closes itself",
        ge=0.0,
    )
    base_tick_interval_seconds: float = Field(
        default=300.0,
        description="World tick interval at speed 1.0",
        gt=0.0,
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed to call the HTTP API",
    )

    @property
    def base_tick_interval_ms(self) -> int:
        return round(self.base_tick_interval_seconds * 1000)


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
