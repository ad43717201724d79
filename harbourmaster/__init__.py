"""
harbourmaster: high-level abstractions of Docker containers.

Built on the Docker SDK, with an object-oriented async interface that is
particularly handy for tests that spin up and then remove containers.

Basic Usage:
    >>> from harbourmaster import Container
    >>> container = await Container.create("alpine")
    >>> container.id
    >>> await container.delete()

    # Context manager (automatic removal)
    >>> async with Container.builder("couchdb").tag("2.3.0").expose(5984, 5984) as c:
    ...     print(c.ports())
"""

from ._version import __version__
from .config import Settings, settings
from .models import (
    ContainerDetails,
    ContainerError,
    ContainerNotFoundError,
    ContainerSpec,
    ContainerState,
    CreateFailedError,
    DeleteFailedError,
    EngineError,
    EngineErrorKind,
    EngineUnreachableError,
    ErrorType,
    HarbourmasterError,
    ImagePullFailedError,
    InvalidStateError,
    PortMapping,
    Protocol,
    PullPolicy,
    StartFailedError,
)
from .services.container import Client, Container, ContainerBuilder, EngineAdapter
from .utils.logging import setup_logging

__all__ = [
    "__version__",
    "Settings",
    "settings",
    "setup_logging",
    # Handles
    "Client",
    "Container",
    "ContainerBuilder",
    "EngineAdapter",
    # Models
    "ContainerDetails",
    "ContainerSpec",
    "ContainerState",
    "PortMapping",
    "Protocol",
    "PullPolicy",
    # Errors
    "HarbourmasterError",
    "EngineError",
    "EngineErrorKind",
    "ErrorType",
    "ContainerError",
    "EngineUnreachableError",
    "ImagePullFailedError",
    "CreateFailedError",
    "StartFailedError",
    "DeleteFailedError",
    "ContainerNotFoundError",
    "InvalidStateError",
]
