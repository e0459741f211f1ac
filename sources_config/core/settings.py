"""
sources_config.core.settings
──────────────────────────────
Snapshot of the environment variables the resolver reads. Reads from
.env → environment variables. Every field is the raw string as found in
the environment; empty means unset. Interpreting the values ("0" ports,
defaults) is the resolver's job, not this model's.

Minimal stack: pydantic-settings + python-dotenv
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvSettings(BaseSettings):
    """Environment variables consumed during endpoint resolution."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    # ── Platform ──────────────────────────────────────────────────────────────
    # Path to the Clowder JSON document; non-empty enables platform mode.
    acg_config: str = Field(default="", alias="ACG_CONFIG")

    # ── Sources API ───────────────────────────────────────────────────────────
    sources_api_host: str = Field(default="", alias="SOURCES_API_HOST")
    sources_api_port: str = Field(default="", alias="SOURCES_API_PORT")

    # ── Kafka ─────────────────────────────────────────────────────────────────
    queue_host: str = Field(default="", alias="QUEUE_HOST")
    queue_port: str = Field(default="", alias="QUEUE_PORT")

    # ── Service ───────────────────────────────────────────────────────────────
    port: str = Field(default="", alias="PORT")


@lru_cache(maxsize=1)
def get_settings() -> EnvSettings:
    """
    Return the singleton environment snapshot. Cached after first call.
    Call _reset_settings() in tests to pick up new env vars.
    """
    return EnvSettings()


def _reset_settings() -> None:
    """For tests — clear the settings cache."""
    get_settings.cache_clear()
