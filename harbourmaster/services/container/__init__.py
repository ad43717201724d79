"""Container lifecycle services.

This package provides the container handle and its collaborators:
- client.py: Docker client wrapper with a shared default
- adapter.py: Async engine operations over the Docker SDK
- handle.py: Container handle lifecycle
- builder.py: Fluent container configuration
"""

from .adapter import EngineAdapter
from .builder import ContainerBuilder
from .client import Client
from .handle import Container

__all__ = ["Client", "Container", "ContainerBuilder", "EngineAdapter"]
