"""Pytest configuration and shared fixtures."""

from unittest.mock import MagicMock

import pytest
from docker import DockerClient

from harbourmaster.services.container import Client

from tests.fakes import FakeEngine


@pytest.fixture
def fake_engine():
    """Engine fake that already has ``alpine:latest``."""
    return FakeEngine(images={"alpine:latest"})


@pytest.fixture
def mock_docker():
    """Mock Docker client for testing."""
    mock_client = MagicMock(spec=DockerClient)
    mock_api = MagicMock()

    mock_api.inspect_image.return_value = {"Id": "sha256:abc"}
    mock_api.pull.return_value = iter([{"status": "Pulling from library/alpine"}])
    mock_api.create_host_config.return_value = {"PortBindings": {}}
    mock_api.create_container.return_value = {"Id": "a" * 64, "Warnings": []}
    mock_api.start.return_value = None
    mock_api.inspect_container.return_value = {
        "Id": "a" * 64,
        "Name": "/test_container",
        "Image": "sha256:abc",
        "State": {"Status": "running", "Running": True, "ExitCode": 0},
        "NetworkSettings": {"Ports": {}},
    }
    mock_api.remove_container.return_value = None

    mock_client.api = mock_api
    mock_client.ping.return_value = True
    return mock_client


@pytest.fixture
def docker_client(mock_docker):
    """harbourmaster client wrapping the mocked SDK client."""
    client = Client.from_docker(mock_docker)
    yield client
    client.close()


@pytest.fixture(autouse=True)
def reset_default_client():
    """Never leak a shared default client between tests."""
    Client._default = None
    yield
    Client._default = None
