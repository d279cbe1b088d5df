"""
Application Configuration Module.

Manages application settings and environment variables using Pydantic for validation.
Provides centralized configuration management with type safety and validation.

Features:
- Environment variable loading and validation
- Secure credential management
- Rate limit strategy options for the GitHub miner
- Path normalization for output directories
"""

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal, Optional
import os
from logger import LogManager


class Settings(BaseSettings):
    """
    Application configuration settings with validation.

    Attributes:
        app_name (str): Name of the application
        dev (bool): Debug mode flag
        log_dir (str): Directory for log files
        log_level (int): Logging level (default: info)
        github_token (Optional[SecretStr]): GitHub API token, unauthenticated when unset
        github_repo_urls (str): Comma-separated repositories (``org/repo`` or URLs)
        data_dir (str): Directory for timeline documents and record snapshots
        plot_output_dir (str): Directory for timeline plots
        plot_timelines (bool): Whether to render a plot per repository
        per_page (int): Page size used when listing issues
        on_primary_limit (str): "sleep-until-reset" or "abort"
        on_secondary_limit (str): "sleep-total-duration" or "abort"
        secondary_limit_wait_seconds (int): Wait used when GitHub sends no Retry-After
        max_secondary_sleep_seconds (int): Total secondary-limit sleep before giving up
        skip_invalid_records (bool): Drop malformed records instead of aborting
        reuse_cached_records (bool): Reuse a record snapshot collected today
    """

    # Application settings
    app_name: str = Field(default="IssueTimeline", description="Application name")
    dev: bool = Field(default=False, description="Debug mode")
    log_dir: str = Field(default="logs", description="Logging directory")
    log_level: int = Field(default=20, description="Logging level, default info")

    # GitHub configuration
    github_token: Optional[SecretStr] = Field(default=None, description="GitHub token")
    github_repo_urls: str = Field(
        default="", description="Comma-separated GitHub repositories to process"
    )
    per_page: int = Field(default=50, ge=1, le=100, description="Issues per page")

    # Rate limit strategy
    on_primary_limit: Literal["sleep-until-reset", "abort"] = Field(
        default="sleep-until-reset", description="Primary rate limit action"
    )
    on_secondary_limit: Literal["sleep-total-duration", "abort"] = Field(
        default="sleep-total-duration", description="Secondary rate limit action"
    )
    secondary_limit_wait_seconds: int = Field(
        default=60, description="Fallback wait on a secondary rate limit"
    )
    max_secondary_sleep_seconds: int = Field(
        default=3600, description="Cap on accumulated secondary rate limit sleep"
    )

    # Timeline configuration
    skip_invalid_records: bool = Field(
        default=False, description="Drop malformed records instead of aborting"
    )
    reuse_cached_records: bool = Field(
        default=True, description="Reuse a record snapshot collected today"
    )

    # Output configuration
    data_dir: str = Field(default="data", description="Data output directory")
    plot_output_dir: str = Field(default="plots", description="Plot output directory")
    plot_timelines: bool = Field(default=True, description="Render timeline plots")

    @property
    def repository_urls(self) -> List[str]:
        """
        Get list of repositories from configuration.

        Returns:
            List[str]: Cleaned repository identifiers, empty entries removed
        """
        return [url.strip() for url in self.github_repo_urls.split(",") if url.strip()]

    @field_validator("data_dir", "plot_output_dir")
    def ensure_absolute_path(cls, v: str) -> str:
        """
        Ensure output directory paths are absolute.

        Args:
            v (str): Directory path to validate

        Returns:
            str: Absolute path to the directory
        """
        if not os.path.isabs(v):
            return os.path.abspath(v)
        return v

    # Configure env file loading
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields in .env file
    )


# Create global settings instance
settings = Settings()

# Initialize logging configuration
logger = LogManager(
    app_name=settings.app_name.lower(),
    log_dir=settings.log_dir,
    development=settings.dev,
    level=settings.log_level,
).logger
