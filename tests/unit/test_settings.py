"""Unit tests for Settings."""

import pytest
from pydantic import ValidationError

from harbourmaster.config import DockerConfig, LoggingConfig, Settings


class TestDefaults:
    """Tests for default values."""

    def test_defaults(self, monkeypatch):
        """Test the documented defaults."""
        for name in ("DOCKER_BASE_URL", "DOCKER_TIMEOUT", "LOG_FORMAT"):
            monkeypatch.delenv(f"HARBOURMASTER_{name}", raising=False)

        settings = Settings(_env_file=None)

        assert settings.docker_base_url is None
        assert settings.docker_timeout == 60
        assert settings.docker_max_pool_size == 10
        assert settings.default_image_tag == "latest"
        assert settings.container_name_slug_separator == "_"
        assert settings.log_format == "json"


class TestEnvironment:
    """Tests for environment overrides."""

    def test_prefixed_environment(self, monkeypatch):
        """Test that HARBOURMASTER_ variables are read."""
        monkeypatch.setenv("HARBOURMASTER_DOCKER_BASE_URL", "tcp://engine:2375")
        monkeypatch.setenv("HARBOURMASTER_DOCKER_TIMEOUT", "15")
        monkeypatch.setenv("HARBOURMASTER_LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.docker_base_url == "tcp://engine:2375"
        assert settings.docker_timeout == 15
        assert settings.log_level == "DEBUG"


class TestValidators:
    """Tests for field validation."""

    def test_rejects_empty_tag(self):
        """Test that an empty default tag is rejected."""
        with pytest.raises(ValidationError) as exc_info:
            Settings(default_image_tag="  ", _env_file=None)

        assert any("default_image_tag" in str(e) for e in exc_info.value.errors())

    def test_rejects_unknown_log_format(self):
        """Test that unknown log formats are rejected."""
        with pytest.raises(ValidationError):
            Settings(log_format="xml", _env_file=None)

    def test_normalises_log_format(self):
        """Test that the log format is lower-cased."""
        assert Settings(log_format="CONSOLE", _env_file=None).log_format == "console"

    def test_rejects_unknown_log_level(self):
        """Test that unknown log levels are rejected."""
        with pytest.raises(ValidationError):
            Settings(log_level="loud", _env_file=None)

    @pytest.mark.parametrize("timeout", [0, 3601])
    def test_timeout_bounds(self, timeout):
        """Test that the engine timeout is bounded."""
        with pytest.raises(ValidationError):
            Settings(docker_timeout=timeout, _env_file=None)


class TestGroupedAccess:
    """Tests for grouped config views."""

    def test_docker_group(self):
        """Test the docker group mirrors flat fields."""
        settings = Settings(docker_base_url="unix:///tmp/d.sock", docker_timeout=20, _env_file=None)

        docker = settings.docker

        assert isinstance(docker, DockerConfig)
        assert docker.base_url == "unix:///tmp/d.sock"
        assert docker.timeout == 20
        assert docker.default_image_tag == "latest"

    def test_logging_group(self):
        """Test the logging group mirrors flat fields."""
        settings = Settings(log_level="warning", log_format="console", _env_file=None)

        logging_config = settings.logging

        assert isinstance(logging_config, LoggingConfig)
        assert logging_config.level == "WARNING"
        assert logging_config.format == "console"
