"""
Configuration and settings for the projects API.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    api_prefix: str = Field(default="")

    # Comma-separated list; entries may contain `*` wildcards.
    allowed_origins: str = Field(default="")

    # Text completion (OpenAI-compatible)
    openai_api_key: Optional[str] = Field(default=None)
    openai_base_url: str = Field(default="https://api.openai.com/v1")
    openai_default_model: str = Field(default="gpt-4o-mini")

    # Photo search
    pexels_api_key: Optional[str] = Field(default=None)
    pexels_base_url: str = Field(default="https://api.pexels.com/v1")

    # Persistence; empty selects a backend from whichever credentials are set.
    project_store: Optional[Literal["memory", "sql", "rest"]] = Field(default=None)
    database_url: Optional[str] = Field(default=None)
    supabase_url: Optional[str] = Field(default=None)
    supabase_service_role_key: Optional[str] = Field(default=None)
    supabase_projects_table: str = Field(default="projects")

    # Development toggles
    use_in_memory_backends: bool = Field(default=False)

    log_level: str = Field(default="INFO")

    @field_validator("project_store", mode="before")
    @classmethod
    def _blank_store_is_auto(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def resolved_project_store(self) -> str:
        if self.use_in_memory_backends:
            return "memory"
        if self.project_store:
            return self.project_store
        if self.supabase_url and self.supabase_service_role_key:
            return "rest"
        if self.database_url:
            return "sql"
        return "memory"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
