"""
Configuration and settings for the tracker service.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="/api")

    # Which persistence backend the process runs on.
    storage_backend: Literal["file", "sql"] = Field(default="file")

    # Document-file backend
    data_dir: str = Field(default="data")

    # Relational backend (any SQLAlchemy URL, Postgres expected)
    database_url: Optional[str] = Field(default=None)

    session_secret: str = Field(default="dev_secret")

    log_level: str = Field(default="INFO")

    def resolved_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.data_dir}/tracker.db"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
