"""Error models and exception classes for harbourmaster."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ErrorType(str, Enum):
    """Error type enumeration."""

    ENGINE_UNREACHABLE = "engine_unreachable"
    ENGINE_ERROR = "engine_error"
    IMAGE_PULL_FAILED = "image_pull_failed"
    CREATE_FAILED = "create_failed"
    START_FAILED = "start_failed"
    DELETE_FAILED = "delete_failed"
    NOT_FOUND = "not_found"
    INVALID_STATE = "invalid_state"
    CONFIGURATION = "configuration"


class EngineErrorKind(str, Enum):
    """Closed set of conditions the engine adapter can report."""

    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    TRANSPORT = "transport"
    OTHER = "other"


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: Optional[str] = Field(None, description="What the detail refers to")
    message: str = Field(..., description="Human-readable error message")
    code: Optional[str] = Field(None, description="Machine-readable error code")


# Custom Exception Classes


class HarbourmasterError(Exception):
    """Base exception for harbourmaster."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType = ErrorType.ENGINE_ERROR,
        details: Optional[List[ErrorDetail]] = None,
    ):
        self.message = message
        self.error_type = error_type
        self.details = details or []
        super().__init__(message)


class EngineError(HarbourmasterError):
    """Error reported by the engine adapter.

    ``kind`` is the closed classification of the failure; ``status_code`` is
    the engine's HTTP status when the failure came from an API response.
    """

    def __init__(
        self,
        message: str,
        kind: EngineErrorKind = EngineErrorKind.OTHER,
        status_code: Optional[int] = None,
        **kwargs,
    ):
        self.kind = kind
        self.status_code = status_code
        error_type = (
            ErrorType.ENGINE_UNREACHABLE
            if kind == EngineErrorKind.TRANSPORT
            else ErrorType.ENGINE_ERROR
        )
        super().__init__(message=message, error_type=error_type, **kwargs)


class ContainerError(HarbourmasterError):
    """Base class for container handle errors."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        container_id: Optional[str] = None,
        engine_error: Optional[EngineError] = None,
        **kwargs,
    ):
        self.container_id = container_id
        self.engine_error = engine_error
        self.cleanup_error: Optional[Exception] = None
        super().__init__(message=message, error_type=error_type, **kwargs)

    def attach_cleanup_error(self, error: Exception) -> None:
        """Record a failed compensating cleanup without replacing this error."""
        self.cleanup_error = error
        self.details.append(
            ErrorDetail(
                field="cleanup",
                message=str(error),
                code=getattr(getattr(error, "kind", None), "value", None),
            )
        )


class EngineUnreachableError(ContainerError):
    """The engine could not be reached."""

    def __init__(self, message: str = "Container engine is unreachable", **kwargs):
        super().__init__(message=message, error_type=ErrorType.ENGINE_UNREACHABLE, **kwargs)


class ImagePullFailedError(ContainerError):
    """Pulling the image failed."""

    def __init__(self, image: str, message: str = None, **kwargs):
        self.image = image
        super().__init__(
            message=message or f"Failed to pull image {image}",
            error_type=ErrorType.IMAGE_PULL_FAILED,
            **kwargs,
        )


class CreateFailedError(ContainerError):
    """The engine rejected container creation."""

    def __init__(self, message: str = "Container creation failed", **kwargs):
        super().__init__(message=message, error_type=ErrorType.CREATE_FAILED, **kwargs)


class StartFailedError(ContainerError):
    """The engine rejected container start."""

    def __init__(self, message: str = "Container start failed", **kwargs):
        super().__init__(message=message, error_type=ErrorType.START_FAILED, **kwargs)


class DeleteFailedError(ContainerError):
    """The engine refused to remove the container."""

    def __init__(self, message: str = "Container removal failed", **kwargs):
        super().__init__(message=message, error_type=ErrorType.DELETE_FAILED, **kwargs)


class ContainerNotFoundError(ContainerError):
    """The engine no longer recognises the container."""

    def __init__(self, container_id: str = None, message: str = None, **kwargs):
        error_message = message or "Container not found"
        if container_id and not message:
            error_message += f": {container_id}"
        super().__init__(
            message=error_message,
            error_type=ErrorType.NOT_FOUND,
            container_id=container_id,
            **kwargs,
        )


class InvalidStateError(ContainerError):
    """Operation invoked on a handle in the wrong lifecycle state."""

    def __init__(self, operation: str, state, **kwargs):
        self.operation = operation
        self.state = state
        state_name = getattr(state, "value", state)
        super().__init__(
            message=f"Cannot {operation} a container in state '{state_name}'",
            error_type=ErrorType.INVALID_STATE,
            **kwargs,
        )
