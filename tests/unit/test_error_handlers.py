"""Unit tests for engine error translation."""

from unittest.mock import MagicMock

import pytest
import requests
from docker import errors as docker_errors

from harbourmaster.models import (
    ContainerError,
    ContainerNotFoundError,
    CreateFailedError,
    DeleteFailedError,
    EngineError,
    EngineErrorKind,
    EngineUnreachableError,
    ErrorType,
    ImagePullFailedError,
    StartFailedError,
)
from harbourmaster.utils.error_handlers import (
    classify_status,
    handle_docker_error,
    translate_engine_error,
)


def api_error(status_code, explanation="explanation"):
    return docker_errors.APIError(
        "engine error", response=MagicMock(status_code=status_code), explanation=explanation
    )


class TestClassifyStatus:
    """Tests for the status code table."""

    @pytest.mark.parametrize(
        "status_code,kind",
        [
            (401, EngineErrorKind.UNAUTHORIZED),
            (403, EngineErrorKind.UNAUTHORIZED),
            (404, EngineErrorKind.NOT_FOUND),
            (409, EngineErrorKind.CONFLICT),
            (400, EngineErrorKind.OTHER),
            (500, EngineErrorKind.OTHER),
            (None, EngineErrorKind.OTHER),
        ],
    )
    def test_status_mapping(self, status_code, kind):
        """Test that each status maps to its kind."""
        assert classify_status(status_code) == kind


class TestHandleDockerError:
    """Tests for handle_docker_error."""

    def test_api_error_keeps_status_and_explanation(self):
        """Test that API errors carry status code and explanation."""
        error = handle_docker_error(api_error(409, "already in use"), "container create")

        assert error.kind == EngineErrorKind.CONFLICT
        assert error.status_code == 409
        assert "container create" in error.message
        assert "already in use" in error.message

    def test_not_found_without_response(self):
        """Test that NotFound is NOT_FOUND even without a response."""
        error = handle_docker_error(docker_errors.ImageNotFound("No such image"))

        assert error.kind == EngineErrorKind.NOT_FOUND
        assert error.status_code is None

    @pytest.mark.parametrize(
        "exception",
        [
            requests.exceptions.ConnectionError("Connection refused"),
            requests.exceptions.ReadTimeout("Read timed out"),
            docker_errors.DockerException("Error while fetching server API version"),
            ConnectionRefusedError("refused"),
        ],
    )
    def test_transport_failures(self, exception):
        """Test that connection-level failures are TRANSPORT."""
        error = handle_docker_error(exception)

        assert error.kind == EngineErrorKind.TRANSPORT
        assert error.error_type == ErrorType.ENGINE_UNREACHABLE

    def test_invalid_argument_is_not_transport(self):
        """Test that SDK argument errors are OTHER."""
        error = handle_docker_error(docker_errors.InvalidArgument("bad port spec"))

        assert error.kind == EngineErrorKind.OTHER

    def test_unknown_exception(self):
        """Test that unknown exceptions become OTHER."""
        error = handle_docker_error(ValueError("weird"), "container start")

        assert error.kind == EngineErrorKind.OTHER
        assert "container start" in error.message

    def test_engine_error_passes_through(self):
        """Test that an EngineError is returned unchanged."""
        original = EngineError("already translated", kind=EngineErrorKind.CONFLICT)

        assert handle_docker_error(original) is original


class TestTranslateEngineError:
    """Tests for translate_engine_error."""

    @pytest.mark.parametrize(
        "operation,kind,expected",
        [
            ("pull", EngineErrorKind.NOT_FOUND, ImagePullFailedError),
            ("pull", EngineErrorKind.UNAUTHORIZED, ImagePullFailedError),
            ("create", EngineErrorKind.CONFLICT, CreateFailedError),
            ("create", EngineErrorKind.NOT_FOUND, CreateFailedError),
            ("start", EngineErrorKind.CONFLICT, StartFailedError),
            ("start", EngineErrorKind.NOT_FOUND, StartFailedError),
            ("delete", EngineErrorKind.NOT_FOUND, ContainerNotFoundError),
            ("delete", EngineErrorKind.CONFLICT, DeleteFailedError),
            ("inspect", EngineErrorKind.NOT_FOUND, ContainerNotFoundError),
        ],
    )
    def test_operation_table(self, operation, kind, expected):
        """Test that each (operation, kind) pair maps to its exception."""
        engine_error = EngineError("engine error", kind=kind)

        error = translate_engine_error(engine_error, operation, image="alpine:latest", container_id="abc")

        assert type(error) is expected
        assert error.engine_error is engine_error

    @pytest.mark.parametrize("operation", ["pull", "create", "start", "delete", "inspect"])
    def test_transport_always_unreachable(self, operation):
        """Test that TRANSPORT maps to EngineUnreachableError for every step."""
        engine_error = EngineError("connection refused", kind=EngineErrorKind.TRANSPORT)

        error = translate_engine_error(engine_error, operation)

        assert isinstance(error, EngineUnreachableError)

    def test_unmapped_operation_falls_back(self):
        """Test that an unmapped pair becomes a generic ContainerError."""
        engine_error = EngineError("driver failed", kind=EngineErrorKind.OTHER)

        error = translate_engine_error(engine_error, "inspect", container_id="abc")

        assert type(error) is ContainerError
        assert error.error_type == ErrorType.ENGINE_ERROR
        assert error.container_id == "abc"

    def test_pull_error_names_image(self):
        """Test that pull errors record the image."""
        engine_error = EngineError("denied", kind=EngineErrorKind.UNAUTHORIZED)

        error = translate_engine_error(engine_error, "pull", image="private/app:1.0")

        assert error.image == "private/app:1.0"
        assert error.message == "denied"

    def test_not_found_keeps_container_id(self):
        """Test that NotFound errors record the container ID."""
        engine_error = EngineError("No such container", kind=EngineErrorKind.NOT_FOUND)

        error = translate_engine_error(engine_error, "delete", container_id="abc123")

        assert error.container_id == "abc123"
        assert error.error_type == ErrorType.NOT_FOUND
