"""Translation of Docker SDK errors into harbourmaster exceptions.

Two tables drive the translation:

- ``STATUS_KIND_MAPPING`` classifies an engine HTTP status into an
  ``EngineErrorKind``.
- ``OPERATION_ERROR_MAPPING`` picks the handle-level exception for a failed
  lifecycle step, keyed by ``(operation, kind)`` with ``(operation, None)`` as
  the per-operation fallback.

Transport failures always become ``EngineUnreachableError``, whatever the step.
"""

from typing import Dict, Optional, Tuple, Type

import requests
import structlog
from docker import errors as docker_errors

from ..models.errors import (
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

logger = structlog.get_logger(__name__)

STATUS_KIND_MAPPING: Dict[int, EngineErrorKind] = {
    401: EngineErrorKind.UNAUTHORIZED,
    403: EngineErrorKind.UNAUTHORIZED,
    404: EngineErrorKind.NOT_FOUND,
    409: EngineErrorKind.CONFLICT,
}

OPERATION_ERROR_MAPPING: Dict[Tuple[str, Optional[EngineErrorKind]], Type[ContainerError]] = {
    ("pull", None): ImagePullFailedError,
    ("create", None): CreateFailedError,
    ("start", None): StartFailedError,
    ("inspect", EngineErrorKind.NOT_FOUND): ContainerNotFoundError,
    ("delete", EngineErrorKind.NOT_FOUND): ContainerNotFoundError,
    ("delete", None): DeleteFailedError,
}

# SDK argument errors are the caller's fault, not the transport's
_NON_TRANSPORT_DOCKER_ERRORS = (
    docker_errors.InvalidArgument,
    docker_errors.InvalidRepository,
    docker_errors.InvalidVersion,
    docker_errors.InvalidConfigFile,
    docker_errors.TLSParameterError,
)


def classify_status(status_code: Optional[int]) -> EngineErrorKind:
    """Map an engine HTTP status code to an error kind."""
    if status_code is None:
        return EngineErrorKind.OTHER
    return STATUS_KIND_MAPPING.get(status_code, EngineErrorKind.OTHER)


def handle_docker_error(error: Exception, operation: str = "engine call") -> EngineError:
    """Convert a Docker SDK (or transport) exception into an ``EngineError``."""
    if isinstance(error, EngineError):
        return error

    if isinstance(error, docker_errors.APIError):
        status_code = error.status_code
        if isinstance(error, docker_errors.NotFound):
            kind = EngineErrorKind.NOT_FOUND
        else:
            kind = classify_status(status_code)
        explanation = error.explanation or str(error)
        return EngineError(
            message=f"Docker API error during {operation}: {explanation}",
            kind=kind,
            status_code=status_code,
        )

    if isinstance(error, (requests.exceptions.ConnectionError, requests.exceptions.Timeout)):
        return EngineError(
            message=f"Docker engine unreachable during {operation}: {error}",
            kind=EngineErrorKind.TRANSPORT,
        )

    if isinstance(error, docker_errors.DockerException):
        if isinstance(error, _NON_TRANSPORT_DOCKER_ERRORS):
            return EngineError(
                message=f"Docker client error during {operation}: {error}",
                kind=EngineErrorKind.OTHER,
            )
        return EngineError(
            message=f"Docker service error during {operation}: {error}",
            kind=EngineErrorKind.TRANSPORT,
        )

    if isinstance(error, (ConnectionError, TimeoutError, requests.exceptions.RequestException)):
        return EngineError(
            message=f"Docker engine unreachable during {operation}: {error}",
            kind=EngineErrorKind.TRANSPORT,
        )

    return EngineError(
        message=f"Unknown Docker error during {operation}: {error}",
        kind=EngineErrorKind.OTHER,
    )


def translate_engine_error(
    error: EngineError,
    operation: str,
    image: str = None,
    container_id: str = None,
) -> ContainerError:
    """Pick the handle-level exception for a failed lifecycle step."""
    kwargs = {"container_id": container_id, "engine_error": error}

    if error.kind == EngineErrorKind.TRANSPORT:
        return EngineUnreachableError(message=error.message, **kwargs)

    error_class = OPERATION_ERROR_MAPPING.get(
        (operation, error.kind)
    ) or OPERATION_ERROR_MAPPING.get((operation, None))

    if error_class is None:
        return ContainerError(
            message=error.message, error_type=ErrorType.ENGINE_ERROR, **kwargs
        )
    if error_class is ImagePullFailedError:
        return ImagePullFailedError(image=image, message=error.message, **kwargs)
    if error_class is ContainerNotFoundError:
        kwargs.pop("container_id")
        return ContainerNotFoundError(
            container_id=container_id, message=error.message, **kwargs
        )
    return error_class(message=error.message, **kwargs)
