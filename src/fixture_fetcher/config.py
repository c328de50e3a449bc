"""Centralized configuration management using Pydantic Settings.

Every knob of the fetcher is an environment variable (or a ``.env`` entry)
documented here. The orchestrator receives a ``Settings`` instance explicitly;
nothing else reads the environment.
"""

from pathlib import Path
from typing import Literal

import httpx
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_NAME = "fixtures.toml"


class PathsConfig(BaseSettings):
    """Where fixtures live and which declarative config describes them."""

    root: Path = Field(
        default=Path("tests/fixtures"),
        description="Fixtures root; every extract_dir is resolved against it",
    )
    config: Path | None = Field(
        default=None,
        description=f"Fixture config file (default: <root>/{DEFAULT_CONFIG_NAME})",
    )

    # Which backend downloads release assets
    # - api: GitHub REST API through httpx (no external tool needed)
    # - gh: the GitHub CLI (`gh release download`)
    fetcher: Literal["api", "gh"] = Field(
        default="api",
        description="Release asset backend",
    )

    model_config = SettingsConfigDict(
        env_prefix="FIXTURES_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


class GitHubConfig(BaseSettings):
    """GitHub access settings for the release asset fetcher."""

    token: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GITHUB_TOKEN", "GH_TOKEN"),
        description="API token (anonymous requests are rate limited to 60/hour)",
    )
    api_url: str = Field(
        default="https://api.github.com",
        description="REST API base URL (override for GitHub Enterprise)",
    )

    # Release assets for app bundles and installers run to hundreds of MB,
    # so the read timeout is generous compared to a normal API call.
    timeout: float = Field(
        default=60.0,
        ge=5.0,
        le=600.0,
        description="Request timeout in seconds",
    )
    user_agent: str | None = Field(
        default=None,
        description="Custom User-Agent header",
    )
    gh_executable: str = Field(
        default="gh",
        description="GitHub CLI executable used by the gh backend",
    )

    model_config = SettingsConfigDict(
        env_prefix="GITHUB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be appended safely."""
        return v.rstrip("/")


class SevenZipConfig(BaseSettings):
    """Installer extraction tool used for PE fixtures."""

    executable: str = Field(
        default="7z",
        description="7-Zip executable name or path",
    )

    model_config = SettingsConfigDict(
        env_prefix="SEVENZIP_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


class LoggingConfig(BaseSettings):
    """Logging configuration with structured logging support."""

    # The transcript on stdout is the primary output, so logs stay quiet by default
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Application log level",
    )

    # Structured Logging
    json_logs: bool = Field(
        default=False,
        description="Enable JSON formatted logs (useful in CI log collectors)",
    )

    # Log File
    file: str | None = Field(
        default=None,
        description="Path to log file (None = stderr)",
    )

    # Log Rotation
    rotation_size: int = Field(
        default=10 * 1024 * 1024,  # 10MB
        ge=1024 * 1024,  # Min 1MB
        description="Log file size before rotation (bytes)",
    )
    rotation_count: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Number of rotated log files to keep",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )


class Settings(BaseSettings):
    """Main application settings combining all configuration sections."""

    app_name: str = Field(
        default="Test Fixtures Downloader",
        description="Name printed in the transcript banner",
    )

    # Component Configurations
    paths: PathsConfig = Field(default_factory=PathsConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    sevenzip: SevenZipConfig = Field(default_factory=SevenZipConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def fixtures_root(self) -> Path:
        return self.paths.root

    @property
    def config_path(self) -> Path:
        """Config file location, defaulting to a file inside the fixtures root."""
        if self.paths.config is not None:
            return self.paths.config
        return self.paths.root / DEFAULT_CONFIG_NAME

    @property
    def user_agent(self) -> str:
        return self.github.user_agent or f"fixture-fetcher/{httpx.__version__}"

    def validate_settings(self) -> list[str]:
        """Validate settings and return list of warnings/info messages."""
        messages = []

        if self.paths.fetcher == "api" and not self.github.token:
            messages.append(
                "WARNING: No GitHub token configured, API requests are rate limited"
            )
        if self.paths.fetcher == "gh" and self.github.token:
            messages.append("INFO: GitHub token is ignored by the gh backend")

        messages.append(f"INFO: Fixtures root: {self.fixtures_root}")
        messages.append(f"INFO: Config file: {self.config_path}")
        messages.append(f"INFO: Fetcher backend: {self.paths.fetcher}")
        messages.append(f"INFO: 7-Zip executable: {self.sevenzip.executable}")

        return messages


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from environment (useful for testing)."""
    global _settings
    _settings = Settings()
    return _settings
