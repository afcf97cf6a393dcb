"""Pydantic Settings model for application configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from changeset_release.utils.constants import DEFAULT_GITHUB_API_URL, DEFAULT_GITHUB_SERVER_URL


class Settings(BaseSettings):
    """Environment variable settings for the application.

    Most values are provided by the GitHub Actions runner.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False

    # GitHub Actions run context
    GITHUB_REPOSITORY: str | None = None
    GITHUB_REF: str | None = None
    GITHUB_SHA: str | None = None
    GITHUB_SERVER_URL: str = DEFAULT_GITHUB_SERVER_URL
    GITHUB_API_URL: str = DEFAULT_GITHUB_API_URL
    GITHUB_OUTPUT: Path | None = None

    # GitHub PAT settings
    GITHUB_TOKEN: str | None = None

    # GitHub App settings
    GITHUB_APP_ID: int | None = None
    GITHUB_APP_PRIVATE_KEY_PATH: Path | None = None
    GITHUB_APP_INSTALLATION_ID: int | None = None


def get_settings() -> Settings:
    """Read settings from the environment and .env file."""
    return Settings()
