"""Docker engine configuration."""

from pydantic import Field
from pydantic_settings import BaseSettings


class DockerConfig(BaseSettings):
    """Docker engine connection settings."""

    base_url: str | None = Field(default=None, alias="docker_base_url")
    timeout: int = Field(default=60, ge=1, le=3600, alias="docker_timeout")
    max_pool_size: int = Field(default=10, ge=1, le=100, alias="docker_max_pool_size")
    use_ssh_client: bool = Field(default=False, alias="docker_use_ssh_client")

    # Container defaults
    default_image_tag: str = Field(default="latest")
    container_name_slug_separator: str = Field(default="_")
    container_label_prefix: str = Field(default="io.harbourmaster")

    class Config:
        env_prefix = ""
        extra = "ignore"
