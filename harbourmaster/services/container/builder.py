"""Builder for fine control over the construction of a ``Container``."""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Union

import docker
import structlog
from docker.utils import parse_repository_tag

from ...config import settings
from ...models.container import ContainerSpec, PortMapping, Protocol, PullPolicy
from ...utils.id_generator import slugged_name
from .adapter import EngineAdapter
from .client import Client
from .handle import Container

logger = structlog.get_logger(__name__)


class ContainerBuilder:
    """Fluent configuration for a new container.

    Every setter returns the builder, so options chain:

        container = await (
            Container.builder("couchdb")
            .tag("2.3.0")
            .name("test_container")
            .slug_length(6)
            .environment_variable("COUCHDB_USER=admin")
            .expose(5984, 5984, Protocol.TCP)
            .pull_on_build()
            .build()
        )

    The builder is also an async context manager that builds on entry and
    deletes the container on exit.
    """

    def __init__(self, image_name: str):
        if not image_name or not image_name.strip():
            raise ValueError("image name must not be empty")
        self._image_name = image_name.strip()
        self._image_tag: Optional[str] = None
        self._name: Optional[str] = None
        self._slug_length = 0
        self._ports: List[PortMapping] = []
        self._environment: List[str] = []
        self._command: Union[str, List[str], None] = None
        self._labels: Dict[str, str] = {}
        self._pull_policy = PullPolicy.IF_NOT_PRESENT
        self._client: Optional[Client] = None
        self._adapter: Optional[EngineAdapter] = None
        self._container: Optional[Container] = None

    def image(self) -> str:
        """Full image reference the container will be created from.

        A reference that already names a tag or digest is used as-is unless
        ``tag()`` overrides it; otherwise the default tag is appended.
        """
        repository, existing_tag = parse_repository_tag(self._image_name)
        if self._image_tag:
            return f"{repository}:{self._image_tag}"
        if existing_tag:
            return self._image_name
        return f"{repository}:{settings.default_image_tag}"

    def tag(self, tag: str) -> "ContainerBuilder":
        """Set the tag of the image. Defaults to ``latest``."""
        self._image_tag = tag
        return self

    def name(self, name: str) -> "ContainerBuilder":
        """Set the name of the container."""
        self._name = name
        return self

    def slug_length(self, length: int) -> "ContainerBuilder":
        """Append a random alphanumeric slug of ``length`` characters to the name.

        In the form ``[container name]_XXXX``. Useful when creating many
        containers that need human readable names but no collisions.
        """
        if length < 0:
            raise ValueError("slug length must not be negative")
        self._slug_length = length
        return self

    def expose(
        self, src_port: int, host_port: int, protocol: Protocol = Protocol.TCP
    ) -> "ContainerBuilder":
        """Publish a container port on the host. Can be called repeatedly."""
        self._ports.append(
            PortMapping(container_port=src_port, host_port=host_port, protocol=Protocol(protocol))
        )
        return self

    def environment_variable(self, variable: str) -> "ContainerBuilder":
        """Add an environment variable in ``KEY=value`` form."""
        if "=" not in variable:
            raise ValueError(f"environment variable must be KEY=value: {variable!r}")
        self._environment.append(variable)
        return self

    def env(self, key: str, value: str) -> "ContainerBuilder":
        """Add an environment variable."""
        return self.environment_variable(f"{key}={value}")

    def command(self, command: Union[str, List[str]]) -> "ContainerBuilder":
        """Override the image's default command."""
        self._command = command
        return self

    def label(self, key: str, value: str) -> "ContainerBuilder":
        """Add a container label."""
        self._labels[key] = value
        return self

    def pull_on_build(self, pull: bool = True) -> "ContainerBuilder":
        """Pull the image before creating even if the engine already has it."""
        self._pull_policy = PullPolicy.ALWAYS if pull else PullPolicy.IF_NOT_PRESENT
        return self

    def client(self, client: Union[Client, docker.DockerClient, None]) -> "ContainerBuilder":
        """Use an alternative engine client.

        Defaults to the globally shared client, which is fine in just about
        all cases. A bare ``docker.DockerClient`` is wrapped.
        """
        if isinstance(client, docker.DockerClient):
            client = Client.from_docker(client)
        self._client = client
        return self

    def adapter(self, adapter: EngineAdapter) -> "ContainerBuilder":
        """Drive an explicit engine adapter instead of one built from the client."""
        self._adapter = adapter
        return self

    def spec(self) -> ContainerSpec:
        """Resolve the options into a creation request.

        The name slug is drawn here, so each call yields a fresh name.
        """
        prefix = settings.container_label_prefix
        labels = {
            f"{prefix}.managed": "true",
            f"{prefix}.created-at": datetime.now(timezone.utc).isoformat(),
            **self._labels,
        }
        return ContainerSpec(
            image=self.image(),
            name=slugged_name(
                self._name, self._slug_length, settings.container_name_slug_separator
            ),
            ports=list(self._ports),
            environment=list(self._environment),
            command=self._command,
            labels=labels,
        )

    async def build(self) -> Container:
        """Create, start and return the container."""
        adapter = self._adapter or EngineAdapter(self._client or Client.default())
        spec = self.spec()
        logger.debug(
            "Building container",
            image=spec.image,
            name=spec.name,
            pull_policy=self._pull_policy.value,
        )
        container = Container(spec.image, adapter)
        await container._provision(spec, self._pull_policy)
        return container

    async def __aenter__(self) -> Container:
        if self._container is not None:
            raise RuntimeError("ContainerBuilder scope is already active")
        self._container = await self.build()
        return self._container

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        container, self._container = self._container, None
        return await container.__aexit__(exc_type, exc, tb)
