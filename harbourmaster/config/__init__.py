"""Configuration management for harbourmaster.

Settings are read from ``HARBOURMASTER_``-prefixed environment variables
(or a ``.env`` file) when the package is imported.

Usage:
    from harbourmaster.config import settings

    # Grouped access
    settings.docker.timeout
    settings.logging.level

    # Flat access
    settings.docker_timeout
    settings.log_level
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .docker import DockerConfig
from .logging import LoggingConfig

LOG_FORMATS = ("json", "console")


class Settings(BaseSettings):
    """Library settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_prefix="HARBOURMASTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Docker engine connection
    docker_base_url: str | None = Field(
        default=None,
        description="Engine endpoint, e.g. unix:///var/run/docker.sock (None = DOCKER_HOST environment)",
    )
    docker_timeout: int = Field(default=60, ge=1, le=3600, description="Per-request engine timeout in seconds")
    docker_max_pool_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum concurrent connections to the engine",
    )
    docker_use_ssh_client: bool = Field(default=False, description="Use the ssh binary for ssh:// engine URLs")

    # Container defaults
    default_image_tag: str = Field(default="latest")
    container_name_slug_separator: str = Field(default="_")
    container_label_prefix: str = Field(default="io.harbourmaster")

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    @field_validator("default_image_tag")
    @classmethod
    def validate_default_image_tag(cls, v):
        """Reject empty or whitespace-only tags."""
        if not v or not v.strip():
            raise ValueError("default_image_tag must not be empty")
        return v.strip()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        """Ensure the log format is one the renderer supports."""
        if v.lower() not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")
        return v.lower()

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Normalise the log level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def docker(self) -> DockerConfig:
        """Access Docker configuration group."""
        return DockerConfig(
            docker_base_url=self.docker_base_url,
            docker_timeout=self.docker_timeout,
            docker_max_pool_size=self.docker_max_pool_size,
            docker_use_ssh_client=self.docker_use_ssh_client,
            default_image_tag=self.default_image_tag,
            container_name_slug_separator=self.container_name_slug_separator,
            container_label_prefix=self.container_label_prefix,
        )

    @property
    def logging(self) -> LoggingConfig:
        """Access logging configuration group."""
        return LoggingConfig(log_level=self.log_level, log_format=self.log_format)


# Global settings instance
settings = Settings()

__all__ = [
    "Settings",
    "settings",
    "DockerConfig",
    "LoggingConfig",
]
