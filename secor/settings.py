"""
Startup settings using pydantic-settings.

These are the few values needed before any configuration file can be read:
where the base properties file lives and where the optional override file
lives. They come from environment variables or a ``.env`` file.
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Resolver startup settings loaded from environment variables.

    Environment Variables:
        SECOR_CONFIG: Path to the base properties file (required to load)
        SECOR_OVERRIDE_CONFIG: Path to the deployment override file (optional)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars not defined here
        case_sensitive=False,
        populate_by_name=True,
    )

    config_path: str | None = Field(
        default=None,
        alias="SECOR_CONFIG",
        description="Path to the base properties file",
    )
    override_path: str | None = Field(
        default=None,
        alias="SECOR_OVERRIDE_CONFIG",
        description="Path to the deployment-specific override file (.properties or .json)",
    )

    @field_validator("config_path", "override_path", mode="before")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat an empty variable the same as an unset one."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


def get_settings() -> Settings:
    """
    Build settings from the current environment.

    Not cached: each execution context reads the environment at its own first load.
    """
    return Settings()
