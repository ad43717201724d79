"""Data models for harbourmaster."""

from .container import (
    ContainerDetails,
    ContainerSpec,
    ContainerState,
    ContainerStatus,
    HostPort,
    PortMap,
    PortMapping,
    Protocol,
    PullPolicy,
    SourcePort,
)
from .errors import (
    ContainerError,
    ContainerNotFoundError,
    CreateFailedError,
    DeleteFailedError,
    EngineError,
    EngineErrorKind,
    EngineUnreachableError,
    ErrorDetail,
    ErrorType,
    HarbourmasterError,
    ImagePullFailedError,
    InvalidStateError,
    StartFailedError,
)

__all__ = [
    # Container models
    "ContainerDetails",
    "ContainerSpec",
    "ContainerState",
    "ContainerStatus",
    "HostPort",
    "PortMap",
    "PortMapping",
    "Protocol",
    "PullPolicy",
    "SourcePort",
    # Errors
    "ContainerError",
    "ContainerNotFoundError",
    "CreateFailedError",
    "DeleteFailedError",
    "EngineError",
    "EngineErrorKind",
    "EngineUnreachableError",
    "ErrorDetail",
    "ErrorType",
    "HarbourmasterError",
    "ImagePullFailedError",
    "InvalidStateError",
    "StartFailedError",
]
