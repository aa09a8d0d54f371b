"""Lightweight configuration for the EOS engine and its HTTP service."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from the environment or a ``.env`` file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    data_dir: Path = Field(default=Path("games"), description="Where game snapshots live")
    rules_path: Path | None = Field(
        default=None,
        description="Optional JSON rule table; the built-in table is used when unset",
    )
    database_url: str = Field(
        default="sqlite:///eos.db", description="SQLAlchemy URL of the match archive"
    )
    database_echo: bool = Field(default=False, description="Log every SQL statement")
    rules_version: str = Field(default="1.0", description="Ruleset version reported by the API")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed to call the HTTP API",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    settings = Settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    return settings
